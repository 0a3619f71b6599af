from flask import Blueprint, jsonify
from sqlalchemy import text

from partyquiz import db

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the party quiz server!'})

@main.route('/health')
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as exc:
        db.session.rollback()
        return jsonify({'status': 'degraded', 'database': f'unavailable: {type(exc).__name__}'}), 503
    return jsonify({'status': 'ok', 'database': 'ok'})
