"""
Constants for the SimpleDB client library.
Protocol values match the 2009-04-15 SimpleDB query API.
"""

# Regional endpoints (only one region is served by this client)
SDB_REGION_EU_WEST_1 = "sdb.eu-west-1.amazonaws.com"

REGIONS = {
    'eu-west-1': SDB_REGION_EU_WEST_1,
}

# Fixed protocol fields sent with every request
SIGNATURE_METHOD = "HmacSHA256"
SIGNATURE_VERSION = "2"
API_VERSION = "2009-04-15"

HTTP_METHOD = "POST"
REQUEST_PATH = "/"
CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

# Parameter names
PARAM_ACCESS_KEY_ID = "AWSAccessKeyId"
PARAM_SIGNATURE = "Signature"
PARAM_SIGNATURE_METHOD = "SignatureMethod"
PARAM_SIGNATURE_VERSION = "SignatureVersion"
PARAM_VERSION = "Version"
PARAM_TIMESTAMP = "Timestamp"
PARAM_ACTION = "Action"

# Default configuration values
DEFAULT_CONFIG = {
    'timeout': None,            # no client-side timeout, transport defaults apply
}

# Log writer
LOG_BATCH_SIZE = 25
LOG_MESSAGE_ATTRIBUTE = "msg"

# Credentials bootstrapping
ENV_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
