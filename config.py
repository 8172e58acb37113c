import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
PUBLIC_DIR = os.path.join(BASE_DIR, 'public')

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-prod')

    # Static assets, generated images and exported sheets all live under public/
    PUBLIC_DIR = os.environ.get('PUBLIC_DIR', PUBLIC_DIR)
    BARCODE_DIR = os.environ.get('BARCODE_DIR', os.path.join(PUBLIC_DIR, 'barcodes'))
    EXPORT_DIR = os.environ.get('EXPORT_DIR', PUBLIC_DIR)

    # Uploads are read in memory
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 3000))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

class TestConfig(Config):
    TESTING = True
    LOG_LEVEL = 'WARNING'
