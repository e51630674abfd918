"""Provider payloads and constants shared by the tests."""

import json
from pathlib import Path

UID_URL = "https://api.weibo.com/2/account/get_uid.json"
PROFILE_URL = "https://api.weibo.com/2/users/show.json"

STRATEGY_CONFIG = {
    "client_id": "123",
    "client_secret": "123",
}

PROFILE_BODY = (Path(__file__).parent / "profile.json").read_text(encoding="utf-8")
PROFILE_JSON = json.loads(PROFILE_BODY)
