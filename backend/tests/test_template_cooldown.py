from config import GuardConfig
from template_cooldown import TemplateCooldown

from conftest import T0


def test_unused_template_is_not_on_cooldown(cooldown):
    assert cooldown.is_on_cooldown("u1", "cup_v1_tr", T0) is False
    assert cooldown.last_used("u1", "cup_v1_tr") is None


def test_cooldown_boundary(cooldown, config):
    cooldown.mark_used("u1", "cup_v1_tr", T0)
    assert cooldown.is_on_cooldown("u1", "cup_v1_tr", T0 + config.template_cooldown_ms - 1)
    assert not cooldown.is_on_cooldown("u1", "cup_v1_tr", T0 + config.template_cooldown_ms)


def test_mark_overwrites_and_is_keyed_per_user(cooldown):
    cooldown.mark_used("u1", "cup_v1_tr", T0)
    cooldown.mark_used("u1", "cup_v1_tr", T0 + 5)
    assert cooldown.last_used("u1", "cup_v1_tr") == T0 + 5
    assert not cooldown.is_on_cooldown("u2", "cup_v1_tr", T0 + 5)
    assert not cooldown.is_on_cooldown("u1", "cup_v1_en", T0 + 5)


def test_zero_cooldown_never_blocks():
    cd = TemplateCooldown(GuardConfig(template_cooldown_ms=0))
    cd.mark_used("u1", "cup_v1_tr", T0)
    assert not cd.is_on_cooldown("u1", "cup_v1_tr", T0)
