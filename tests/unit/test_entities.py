import numpy as np
import pytest

from novadefense.sim.entities import (
    BlastSource,
    EntityKind,
    Explosion,
    Missile,
    Rocket,
    Smoke,
    advance_explosion,
    advance_missile,
    advance_rocket,
    advance_smoke,
    entity_to_dict,
    step_toward,
)


def _rocket(pos, target, speed=50.0) -> Rocket:
    return Rocket(
        entity_id="r",
        pos=np.array(pos, dtype=np.float64),
        target=np.array(target, dtype=np.float64),
        speed=speed,
        start_x=float(pos[0]),
    )


def _missile(pos, target, tracking_id=None) -> Missile:
    return Missile(
        entity_id="m",
        origin=np.array(pos, dtype=np.float64),
        pos=np.array(pos, dtype=np.float64),
        target=np.array(target, dtype=np.float64),
        speed=600.0,
        tracking=tracking_id is not None,
        target_rocket_id=tracking_id,
    )


def test_step_toward_never_overshoots():
    pos = np.array([0.0, 0.0])
    target = np.array([3.0, 4.0])
    assert np.allclose(step_toward(pos, target, 2.5), [1.5, 2.0])
    assert np.allclose(step_toward(pos, target, 100.0), target)


def test_rocket_moves_linearly_at_speed():
    rocket = _rocket([100.0, 0.0], [100.0, 500.0], speed=50.0)
    arrived = advance_rocket(rocket, 0.5, arrival_eps=2.0)
    assert not arrived
    assert np.allclose(rocket.pos, [100.0, 25.0])


def test_rocket_arrives_after_landing_on_target():
    rocket = _rocket([100.0, 490.0], [100.0, 500.0], speed=50.0)
    assert not advance_rocket(rocket, 1.0, arrival_eps=2.0)
    assert np.allclose(rocket.pos, rocket.target)
    assert advance_rocket(rocket, 1.0, arrival_eps=2.0)
    assert not rocket.alive
    # Dead rockets do not report a second arrival.
    assert not advance_rocket(rocket, 1.0, arrival_eps=2.0)


def test_rocket_target_is_fixed():
    rocket = _rocket([0.0, 0.0], [300.0, 400.0])
    before = rocket.target.copy()
    for _ in range(5):
        advance_rocket(rocket, 0.1, arrival_eps=2.0)
    assert np.array_equal(rocket.target, before)


def test_tracking_missile_follows_live_rocket():
    quarry = _rocket([300.0, 100.0], [300.0, 540.0])
    missile = _missile([50.0, 540.0], [0.0, 0.0], tracking_id="r")
    advance_missile(missile, 0.01, 5.0, {"r": quarry})
    assert np.allclose(missile.target, quarry.pos)

    quarry.pos = np.array([320.0, 120.0])
    advance_missile(missile, 0.01, 5.0, {"r": quarry})
    assert np.allclose(missile.target, [320.0, 120.0])


def test_tracking_missile_keeps_last_point_when_quarry_dies():
    quarry = _rocket([300.0, 100.0], [300.0, 540.0])
    missile = _missile([50.0, 540.0], [0.0, 0.0], tracking_id="r")
    advance_missile(missile, 0.01, 5.0, {"r": quarry})
    last_seen = quarry.pos.copy()

    quarry.alive = False
    quarry.pos = np.array([999.0, 999.0])
    detonated = False
    for _ in range(200):
        if advance_missile(missile, 0.05, 5.0, {}):
            detonated = True
            break
    assert detonated
    assert np.allclose(missile.target, last_seen)


def test_untracked_missile_detonates_near_target():
    missile = _missile([0.0, 0.0], [3.0, 0.0])
    assert advance_missile(missile, 0.0, 5.0, {})
    assert not missile.alive


def test_explosion_grows_then_dies_at_max():
    blast = Explosion(entity_id="e", center=np.zeros(2), max_radius=50.0, growth_rate=120.0)
    radii = []
    while blast.alive:
        advance_explosion(blast, 0.1)
        radii.append(blast.radius)
    assert radii == sorted(radii)
    assert blast.radius == pytest.approx(50.0)
    # Reaches max, spends one tick at full size, then dies.
    assert radii[-1] == radii[-2] == pytest.approx(50.0)


def test_explosion_tracking_flag_follows_source():
    assert Explosion("e", np.zeros(2), 50.0, 120.0, source=BlastSource.TRACKING).tracking
    assert not Explosion("e", np.zeros(2), 50.0, 120.0, source=BlastSource.IMPACT).tracking


def test_smoke_rises_and_fades():
    rng = np.random.default_rng(0)
    smoke = Smoke(entity_id="s", pos=np.array([100.0, 500.0]), opacity=0.5, size=12.0)
    advance_smoke(smoke, 1.0, rng)
    assert smoke.pos[1] == pytest.approx(495.0)
    assert abs(smoke.pos[0] - 100.0) <= 1.0
    assert smoke.opacity == pytest.approx(0.45)
    advance_smoke(smoke, 100.0, rng)
    assert smoke.opacity == 0.0
    assert not smoke.alive


def test_entity_to_dict_keyed_on_kind():
    rocket = _rocket([1.0, 2.0], [3.0, 4.0])
    assert rocket.kind is EntityKind.ROCKET
    d = entity_to_dict(rocket)
    assert d["pos"] == [1.0, 2.0]
    assert d["target"] == [3.0, 4.0]

    blast = Explosion("e", np.array([5.0, 6.0]), 40.0, 120.0, source=BlastSource.SHIELD, radius=10.0)
    assert entity_to_dict(blast)["source"] == "shield"
