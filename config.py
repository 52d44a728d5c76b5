import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _team_members():
    """Routing keys shown on the contact form. Mailboxes come from <KEY>_EMAIL."""
    names = {
        "jatinder": "Jatinder Kaur",
        "mansi": "Mansi Keer",
        "madhusudan": "Madhusudan Mainali",
        "ramesh": "Ramesh Kumawat",
    }
    return {
        key: {"name": name, "email": os.environ.get(f"{key.upper()}_EMAIL")}
        for key, name in names.items()
    }


class Config:
    """Settings shared by every environment."""
    SECRET_KEY = os.environ.get('SECRET_KEY')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # DATABASE_URL wins; otherwise a local SQLite file
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f"sqlite:///{os.path.join(BASE_DIR, 'client_inquiries.db')}"
    )
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024

    # ── Company / routing ──
    COMPANY_NAME = os.environ.get('COMPANY_NAME', 'Menu Makers')
    COMPANY_EMAIL = os.environ.get('COMPANY_EMAIL', 'menumakers17@gmail.com')
    TEAM_MEMBERS = _team_members()
    FOLLOW_UP_HOURS = int(os.environ.get('FOLLOW_UP_HOURS', 48))

    # ── Email delivery ──
    MAIL_TRANSPORT = os.environ.get('MAIL_TRANSPORT', 'smtp')  # smtp | sendgrid | console
    MAIL_FROM_EMAIL = os.environ.get('MAIL_FROM_EMAIL') or os.environ.get('SMTP_USER')
    MAIL_FROM_NAME = os.environ.get('MAIL_FROM_NAME', COMPANY_NAME)
    SMTP_HOST = os.environ.get('SMTP_HOST', 'smtp.gmail.com')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', 465))
    SMTP_USE_SSL = _env_flag('SMTP_USE_SSL', True)
    SMTP_USER = os.environ.get('SMTP_USER')
    SMTP_PASS = os.environ.get('SMTP_PASS')
    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY')

    # ── Admin ──
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME', 'admin')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    LOGIN_MAX_ATTEMPTS = 5
    LOGIN_BLOCK_SECONDS = 300
    ALLOW_DATA_RESET = False

    # ── Rate limiting ──
    CONTACT_RATE_LIMIT = os.environ.get('CONTACT_RATE_LIMIT', '5 per 15 minutes')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Session hardening (overridable per environment)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 1800  # seconds

    @staticmethod
    def get_logging_config(log_dir):
        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': '[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
                }
            },
            'handlers': {
                'file': {
                    'class': 'logging.handlers.RotatingFileHandler',
                    'filename': os.path.join(log_dir, 'menumakers.log'),
                    'maxBytes': 1024 * 1024 * 10,  # 10MB
                    'backupCount': 5,
                    'formatter': 'default',
                    'encoding': 'utf-8'
                },
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'default'
                }
            },
            'root': {
                'level': 'INFO',
                'handlers': ['file', 'console']
            }
        }


class DevelopmentConfig(Config):
    DEBUG = True
    SESSION_COOKIE_SECURE = False  # plain HTTP locally
    MAIL_TRANSPORT = os.environ.get('MAIL_TRANSPORT', 'console')
    ALLOW_DATA_RESET = True


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True

    def __init__(self):
        if not self.SECRET_KEY:
            raise RuntimeError("SECRET_KEY environment variable is not set")
        if not self.ADMIN_PASSWORD:
            raise RuntimeError("ADMIN_PASSWORD environment variable is not set")


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
