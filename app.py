import logging
import os
from flask import Flask, jsonify
from dotenv import load_dotenv
from flask_wtf.csrf import CSRFError, CSRFProtect
from flask_migrate import Migrate
from models import db
from extensions import limiter
from werkzeug.middleware.proxy_fix import ProxyFix

# Load environment variables from .env
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(BASE_DIR, '.env'), override=True)

from config import config_by_name
from services.errors import ServiceError, StoreError, DeliveryError
from services.inquiry_store import InquiryStore
from services.notification_service import build_notification_sender

app = Flask(__name__)
# Behind a reverse proxy: trust one hop of X-Forwarded-* headers
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

# Environment config (defaults to production)
env_name = os.environ.get('FLASK_ENV', 'production')
app_config = config_by_name[env_name]()
app.config.from_object(app_config)

# Logging
LOG_DIR = os.path.join(BASE_DIR, 'logs')
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

from logging.config import dictConfig
dictConfig(app_config.get_logging_config(LOG_DIR))

logger = logging.getLogger(__name__)

# Extensions
db.init_app(app)
migrate = Migrate(app, db)
csrf = CSRFProtect(app)
limiter.init_app(app)

app.extensions['notification_sender'] = build_notification_sender(app.config)
logger.info("Email transport: %s", app.config.get('MAIL_TRANSPORT'))

# Central blueprint registration
from routes import register_blueprints
register_blueprints(app)

# Schema is create-if-not-exists; the default admin is seeded once
with app.app_context():
    InquiryStore(db).init_schema(app.config['ADMIN_USERNAME'], app.config.get('ADMIN_PASSWORD'))


@app.route('/health')
def health():
    try:
        db.session.execute(db.text('SELECT 1'))
        return jsonify({"status": "healthy", "database": "connected"}), 200
    except Exception as e:
        logger.error("Health check failed: %s", e)
        return jsonify({"status": "unhealthy", "database": "unavailable"}), 503


@app.after_request
def set_security_headers(response):
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response


@app.errorhandler(ServiceError)
def handle_service_error(e):
    if isinstance(e, (StoreError, DeliveryError)):
        logger.error("Request failed with %s: %s", type(e).__name__, e.message)
    return jsonify(e.to_response()), e.status_code


@app.errorhandler(CSRFError)
def handle_csrf_error(e):
    return jsonify({"success": False, "message": e.description}), 400


@app.errorhandler(404)
def page_not_found(e):
    return jsonify({"success": False, "message": "Page not found"}), 404


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({"success": False, "message": "Method not allowed"}), 405


@app.errorhandler(429)
def too_many_requests(e):
    return jsonify({"success": False, "message": e.description}), 429


@app.errorhandler(500)
def internal_server_error(e):
    logger.exception("500 Internal Server Error: %s", e)
    return jsonify({"success": False, "message": "Internal server error"}), 500


if __name__ == '__main__':
    use_debug = os.environ.get('FLASK_DEBUG', '0') == '1'
    app.run(host='127.0.0.1', port=int(os.environ.get('PORT', 3000)), debug=use_debug)
