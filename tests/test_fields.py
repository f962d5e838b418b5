import pytest

from cp750.fields import (
    CTRL_FADER_DELTA,
    FIELDS,
    QUERY_TOKEN,
    SYS_FADER,
    SYS_INPUT_MODE,
    SYS_MUTE,
    SYSINFO_VERSION,
    InputMode,
    field_by_key,
    field_by_ordinal,
    queryable_fields,
    resolve_field,
)


def test_registry_keys_and_ordinals():
    assert [field.key for field in FIELDS] == [
        "cp750.sysinfo.version",
        "cp750.sys.fader",
        "cp750.sys.mute",
        "cp750.sys.input_mode",
        "cp750.ctrl.fader_delta",
    ]
    for ordinal, field in enumerate(FIELDS):
        assert field.ordinal == ordinal
        assert field_by_ordinal(ordinal) is field
        assert field_by_key(field.key) is field
    assert field_by_ordinal(len(FIELDS)) is None
    assert field_by_key("cp750.sys.FADER") is None


def test_query_token_allowed_except_for_ctrl_fields():
    for field in FIELDS:
        assert field.is_allowed(QUERY_TOKEN) is not field.is_control
        assert field.allowed_values()
    assert CTRL_FADER_DELTA not in queryable_fields()
    assert SYSINFO_VERSION in queryable_fields()


@pytest.mark.parametrize(
    "value, allowed",
    [("0", True), ("100", True), ("35", True), ("101", False), ("-1", False),
     ("07", False), ("+7", False), (" 7", False), ("abc", False), ("", False)],
)
def test_fader_range(value, allowed):
    assert SYS_FADER.is_allowed(value) is allowed


def test_fader_delta_range_and_mute():
    assert CTRL_FADER_DELTA.is_allowed("-100")
    assert CTRL_FADER_DELTA.is_allowed("100")
    assert not CTRL_FADER_DELTA.is_allowed("-101")
    assert SYS_MUTE.is_allowed("1")
    assert not SYS_MUTE.is_allowed("2")
    assert not SYSINFO_VERSION.is_allowed("1.0")


def test_input_mode_tokens():
    assert SYS_INPUT_MODE.is_allowed("last")
    assert SYS_INPUT_MODE.is_allowed("non_sync")
    assert not SYS_INPUT_MODE.is_allowed("hdmi")
    assert InputMode.from_any("DIG_1") is InputMode.DIG_1
    assert InputMode.from_any(InputMode.MIC) is InputMode.MIC
    assert InputMode.from_any("hdmi") is None
    assert InputMode.from_any(None) is None


def test_describe_domain():
    assert SYS_FADER.describe_domain() == "?|0..100"
    assert CTRL_FADER_DELTA.describe_domain() == "-100..100"
    assert SYS_INPUT_MODE.describe_domain().startswith("?|analog|dig_1")


def test_resolve_field():
    assert resolve_field("cp750.sys.mute") is SYS_MUTE
    assert resolve_field(SYS_MUTE) is SYS_MUTE
    with pytest.raises(KeyError):
        resolve_field("cp750.sys.volume")
