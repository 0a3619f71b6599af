"""Quiz domain services: scoring, leaderboard, party lifecycle and answers.

``scoring``, ``leaderboard`` and ``lifecycle`` are pure and never touch the
database or Socket.IO. ``parties`` and ``answers`` wrap them with storage
and emit realtime notifications after commit, keeping transport concerns
out of the HTTP routes.
"""
