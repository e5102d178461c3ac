PROJECT_NAME = "IslamWiki"
API_V1_STR = "/api/v1"
VERSION = "0.1.0"
CONFIG_EXPORT_VERSION = "0.0.20"
