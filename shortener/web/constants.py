# Event codes attached to request logs and error bodies
URL_SHORTENED = 'URL_SHORTENED'
URL_ALREADY_SHORTENED = 'URL_ALREADY_SHORTENED'
BATCH_SHORTENED = 'BATCH_SHORTENED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
INVALID_REQUEST = 'INVALID_REQUEST'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'

# Flask app.extensions key holding the storage backend
DAO_EXTENSION = 'shortener.dao'

# Flask app.config key holding the storage deadline in seconds
REQUEST_TIMEOUT_CONFIG = 'SHORTENER_REQUEST_TIMEOUT'

# Flask app.config key holding the public base URL
BASE_URL_CONFIG = 'SHORTENER_BASE_URL'

# Session key holding the anonymous user identity
USER_ID_SESSION_KEY = 'user_id'
