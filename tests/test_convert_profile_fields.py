"""Tests for the profile field name mapping."""

from core.weibo_token import WeiboTokenStrategy
from service.weibo_oauth_service import convert_profile_fields

from tests.fixtures import STRATEGY_CONFIG


def test_empty_fields_give_empty_string():
    assert convert_profile_fields() == ""
    assert convert_profile_fields([]) == ""


def test_mapped_fields_are_translated_in_order():
    fields = ["photos", "id", "displayName", "profileUrl", "gender"]
    assert convert_profile_fields(fields) == "profile_image_url,id,screen_name,profile_url,gender"


def test_unmapped_fields_pass_through():
    # name and emails have no entry in the table, so they are not expanded
    assert convert_profile_fields(["username", "name", "emails", "custom"]) == "username,name,emails,custom"


def test_strategy_exposes_converter_and_configured_fields():
    strategy = WeiboTokenStrategy(
        {**STRATEGY_CONFIG, "profile_fields": ["id", "displayName", "photos"]},
        lambda *args: None,
    )
    assert WeiboTokenStrategy.convert_profile_fields(["displayName"]) == "screen_name"
    assert strategy.profile_fields_param == "id,screen_name,profile_image_url"
