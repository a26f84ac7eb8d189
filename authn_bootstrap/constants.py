# Setting names, as read from the process environment
AUTHN_URL = "CONJUR_AUTHN_URL"
ACCOUNT = "CONJUR_ACCOUNT"
AUTHN_LOGIN = "CONJUR_AUTHN_LOGIN"
POD_NAME = "MY_POD_NAME"
POD_NAMESPACE = "MY_POD_NAMESPACE"
JWT_TOKEN_PATH = "JWT_TOKEN_PATH"
CONTAINER_MODE = "CONTAINER_MODE"
CONJUR_VERSION = "CONJUR_VERSION"
CLIENT_CERT_RETRY_COUNT_LIMIT = "CONJUR_CLIENT_CERT_RETRY_COUNT_LIMIT"
TOKEN_TIMEOUT = "CONJUR_TOKEN_TIMEOUT"
SSL_CERTIFICATE = "CONJUR_SSL_CERTIFICATE"
CERT_FILE = "CONJUR_CERT_FILE"
CLIENT_CERT_PATH = "CONJUR_CLIENT_CERT_PATH"
TOKEN_FILE_PATH = "CONJUR_AUTHN_TOKEN_FILE"

SETTING_NAMES = (
    AUTHN_URL,
    ACCOUNT,
    AUTHN_LOGIN,
    POD_NAME,
    POD_NAMESPACE,
    JWT_TOKEN_PATH,
    CONTAINER_MODE,
    CONJUR_VERSION,
    CLIENT_CERT_RETRY_COUNT_LIMIT,
    TOKEN_TIMEOUT,
    SSL_CERTIFICATE,
    CERT_FILE,
    CLIENT_CERT_PATH,
    TOKEN_FILE_PATH,
)

# Authenticator markers looked up in the authn URL
K8S_AUTHENTICATOR = "authn-k8s"
JWT_AUTHENTICATOR = "authn-jwt"

# Defaults for optional settings
DEFAULT_CONJUR_VERSION = "5"
DEFAULT_CLIENT_CERT_RETRY_COUNT_LIMIT = 10
DEFAULT_TOKEN_TIMEOUT = "6m0s"
DEFAULT_CLIENT_CERT_PATH = "/etc/conjur/ssl/client.pem"
DEFAULT_TOKEN_FILE_PATH = "/run/conjur/access-token"

# The Conjur server injects the signed client certificate here, the location
# is hardcoded on the server side.
CLIENT_CERT_SOURCE_PATH = "/etc/conjur/ssl/client.pem"

# Timing constants (in seconds)
CLIENT_CERT_POLL_INTERVAL = 0.1
CLIENT_CERT_POLL_MAX_INTERVAL = 1.0
