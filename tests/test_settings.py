import pytest

from fanucbot.geometry import Transform
from fanucbot.settings import FanucSettings, load_settings

IDENTITY = Transform().values()
W2U = [1, 0, 0, 10, 0, 1, 0, 20, 0, 0, 1, 30]
U2W = [1, 0, 0, -10, 0, 1, 0, -20, 0, 0, 1, -30]


def _csv(values):
    return ", ".join(str(v) for v in values)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.ini")
    assert settings == FanucSettings()
    assert settings.server_ip == "127.0.0.1"
    assert settings.server_relay_port == 11000
    assert settings.server_state_port == 11002
    assert settings.cam_delay == 3000
    assert settings.up is True and settings.top is True and settings.flip is False


def test_general_section_values(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text(
        "[General]\n"
        "bigendian=true\n"
        "server_ip=10.0.0.5\n"
        "server_relay_port=12000\n"
        "server_state_port=12002\n"
        "prefix1=3\n"
        "prefix2=4\n"
        "flip=true\n"
        "up=false\n"
        "top=0\n"
        "cam_delay=500\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.bigendian is True
    assert settings.server_ip == "10.0.0.5"
    assert settings.server_relay_port == 12000
    assert settings.server_state_port == 12002
    assert (settings.prefix1, settings.prefix2) == (3, 4)
    assert settings.flip is True
    assert settings.up is False
    assert settings.top is False
    assert settings.cam_delay == 500


def test_keys_without_section(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text("server_ip=\"192.168.1.2\"\nprefix1=9\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.server_ip == "192.168.1.2"
    assert settings.prefix1 == 9
    assert settings.server_relay_port == 11000


def test_transforms_read_from_lists(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text(f"[General]\nworld2user={_csv(W2U)}\nuser2world={_csv(U2W)}\n",
                    encoding="utf-8")
    settings = load_settings(path)
    assert settings.world2user.values() == tuple(float(v) for v in W2U)
    assert settings.user2world.values() == tuple(float(v) for v in U2W)
    point = settings.user2world.apply(settings.world2user.apply((1.0, 2.0, 3.0)))
    assert point == pytest.approx((1.0, 2.0, 3.0))


def test_transforms_need_both_keys(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text(f"[General]\nworld2user={_csv(W2U)}\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.world2user.values() == IDENTITY
    assert settings.user2world.values() == IDENTITY


def test_short_transform_lists_are_ignored(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text(f"[General]\nworld2user={_csv(W2U[:11])}\nuser2world={_csv(U2W)}\n",
                    encoding="utf-8")
    settings = load_settings(path)
    assert settings.world2user.values() == IDENTITY
    assert settings.user2world.values() == IDENTITY


def test_bad_number_reads_as_zero(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text("[General]\nserver_relay_port=abc\n", encoding="utf-8")
    assert load_settings(path).server_relay_port == 0


def test_other_sections_are_ignored(tmp_path):
    path = tmp_path / "fanuc.ini"
    path.write_text("[Other]\nserver_ip=1.2.3.4\n", encoding="utf-8")
    assert load_settings(path).server_ip == "127.0.0.1"