import argparse

from formation_server import build_overrides


def args(**kw):
    base = {"mode": "full", "config": "config.json", "photo": None, "particles": None, "seed": None}
    base.update(kw)
    return argparse.Namespace(**base)


def test_no_flags_no_overrides():
    assert build_overrides(args()) == {}


def test_flags_become_config_sections():
    overrides = build_overrides(args(photo=["a.jpg", "b.jpg"], particles=300, seed=4))
    assert overrides == {
        "formation": {"particle_count": 300, "seed": 4},
        "photos": ["a.jpg", "b.jpg"],
    }
