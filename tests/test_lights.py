"""Unit tests for the light table and ambient level."""

import math

import pytest


class TestLights:
    """Tests for adding and reading lights."""

    def test_add_light_normalizes_direction(self):
        """Directions are stored as unit vectors."""
        from src.whitted.scene.lights import Light, add_light, get_light, get_light_count

        idx = add_light(Light(direction=(0.0, -2.0, 0.0), intensity=(1.0, 0.5, 0.25)))

        assert idx == 0
        assert get_light_count() == 1
        light = get_light(idx)
        assert light.direction == pytest.approx((0.0, -1.0, 0.0))
        assert light.intensity == pytest.approx((1.0, 0.5, 0.25))
        assert light.is_spot is False

    def test_zero_direction_stays_zero(self):
        """A zero direction is kept rather than producing NaN."""
        from src.whitted.scene.lights import normalize_direction

        assert normalize_direction((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_spot_light_fields(self):
        """Spot light position and cutoff are stored."""
        from src.whitted.scene.lights import Light, add_light, get_light

        add_light(
            Light(
                direction=(1.0, 1.0, 0.0),
                position=(1.0, 2.0, 3.0),
                intensity=(1.0, 1.0, 1.0),
                is_spot=True,
                cutoff=0.6,
            )
        )
        light = get_light(0)

        s = 1.0 / math.sqrt(2.0)
        assert light.is_spot is True
        assert light.position == pytest.approx((1.0, 2.0, 3.0))
        assert light.cutoff == pytest.approx(0.6)
        assert light.direction == pytest.approx((s, s, 0.0))

    def test_clear_lights_resets_count_and_ambient(self):
        """Clearing removes lights and blackens the ambient level."""
        from src.whitted.scene.lights import (
            Light,
            add_light,
            clear_lights,
            get_ambient,
            get_light_count,
            set_ambient,
        )

        add_light(Light(direction=(0, -1, 0)))
        set_ambient((0.1, 0.2, 0.3))
        clear_lights()

        assert get_light_count() == 0
        assert get_ambient() == (0.0, 0.0, 0.0)

    def test_capacity_exceeded_raises(self):
        """The light table has a fixed capacity."""
        from src.whitted.scene.lights import MAX_LIGHTS, Light, add_light

        for _ in range(MAX_LIGHTS):
            add_light(Light(direction=(0, -1, 0)))

        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light(Light(direction=(0, -1, 0)))

    def test_invalid_index_raises(self):
        """Reading a light that does not exist fails."""
        from src.whitted.scene.lights import get_light

        with pytest.raises(IndexError):
            get_light(0)


class TestAmbient:
    """Tests for the ambient level."""

    def test_set_and_get(self):
        """The ambient level round-trips through the field."""
        from src.whitted.scene.lights import get_ambient, set_ambient

        set_ambient((0.1, 0.2, 0.3))
        assert get_ambient() == pytest.approx((0.1, 0.2, 0.3))
