CONF_HOST = "hostname"
CONF_DEVICE_CODE = "devicecode"
CONF_OPEN_POSITION = "openPosition"
CONF_CLOSE_POSITION = "closePosition"

DEVICE_CODE_LENGTH = 8

# Digest auth; the firmware only knows this user and MD5
AUTH_USERNAME = "user"
DEFAULT_SCHEME = "http://"
REQUEST_TIMEOUT_SEC = 8.0

# RPC endpoints
RPC_GET_INFO = "/rpc/Slide.GetInfo"
RPC_SET_POS = "/rpc/Slide.SetPos"
RPC_STOP = "/rpc/Slide.Stop"
RPC_CALIBRATE = "/rpc/Slide.Calibrate"
RPC_WIFI = "/rpc/Slide.Config.WiFi"

# Raw position domain: 0.0 = open, 1.0 = closed
DEFAULT_OPEN_POSITION = 0.0
DEFAULT_CLOSE_POSITION = 1.0

# Settle detection tuning
START_DELAY_SEC = 2.0
POLL_INTERVAL_SEC = 1.0
COOLDOWN_SEC = 2.0          # brake settling after the last move
CALIBRATE_DELAY_SEC = 5.0
MAX_POLLS = 120
