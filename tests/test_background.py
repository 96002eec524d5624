import math
import random
import unittest
from unittest import mock

import pygame

from crackfield.config.settings import BackgroundSettings, display
from crackfield.core import background as background_module
from crackfield.core.crack import Crack
from crackfield.core.injection import Injection
from support import FakeClock, make_background, make_crack


class TestInjectionLifecycle(unittest.TestCase):

    def test_removed_when_radius_exceeds_max(self):
        background = make_background(injection_radius=80, injection_speed=1.5)
        background.controller.on_pointer_down((100, 100))
        background.controller.on_pointer_up((100, 100))
        expected_ticks = math.ceil(80 / 1.5)

        for _ in range(expected_ticks - 1):
            background.tick()
        self.assertEqual(len(background.injections), 1)
        self.assertAlmostEqual(background.injections[0].radius, 79.5)

        background.tick()
        self.assertEqual(background.injections, [])

    def test_life_decays_by_fixed_step(self):
        background = make_background(injection_radius=10000, injection_speed=1)
        background.controller.on_click((100, 100))
        injection = background.injections[0]
        previous = injection.life
        for _ in range(50):
            background.tick()
            self.assertAlmostEqual(previous - injection.life, 0.008)
            previous = injection.life

    def test_removed_exactly_when_expired(self):
        background = make_background(injection_radius=10000, injection_speed=1)
        background.controller.on_click((100, 100))
        injection = background.injections[0]
        for _ in range(200):
            background.tick()
            if injection in background.state.injections:
                self.assertGreater(injection.life, 0)
                self.assertLessEqual(injection.radius, injection.max_radius)
            else:
                self.assertTrue(injection.life <= 0 or injection.radius > injection.max_radius)
                break
        else:
            self.fail("injection never expired")

    def test_particle_distance_never_decreases(self):
        background = make_background()
        background.controller.on_click((100, 100))
        injection = background.injections[0]
        previous = [p.distance for p in injection.particles]
        for _ in range(20):
            background.tick()
            current = [p.distance for p in injection.particles]
            for before, after in zip(previous, current):
                self.assertGreater(after, before)
            previous = current


class TestFilling(unittest.TestCase):

    def test_point_under_injection_fills_on_first_tick(self):
        background = make_background(injection_speed=0.01)
        crack = make_crack((200, 200), (300, 300))
        background.state.cracks.add(crack)
        background.controller.on_click((200, 200))

        background.tick()
        self.assertTrue(crack.points[0].filled)
        self.assertFalse(crack.points[1].filled)

    def test_filled_never_reverts(self):
        background = make_background(injection_radius=30)
        crack = make_crack((200, 200), (210, 200), (400, 400))
        background.state.cracks.add(crack)
        background.controller.on_click((200, 200))
        for _ in range(10):
            background.tick()
        self.assertEqual([p.filled for p in crack.points], [True, True, False])
        for _ in range(100):
            background.tick()
            self.assertTrue(crack.points[0].filled)
            self.assertTrue(crack.points[1].filled)
        self.assertEqual(background.injections, [])

    def test_low_quality_fills_every_other_tick(self):
        background = make_background(low_quality=True, injection_speed=1)
        crack = make_crack((200, 200), (203, 200))
        background.state.cracks.add(crack)
        background.controller.on_click((200, 200))
        background.tick()  # frame 1, no fill
        self.assertFalse(crack.points[0].filled)
        background.tick()  # frame 2
        self.assertTrue(crack.points[0].filled)
        self.assertFalse(crack.points[1].filled)


class TestReveal(unittest.TestCase):

    def test_reveal_bounded_and_monotonic(self):
        background = make_background(seed=21, populate=True)
        lengths = {id(c): len(c.points) for c in background.cracks}
        previous = {id(c): c.reveal_progress for c in background.cracks}
        for _ in range(120):
            background.tick()
            for crack in background.cracks:
                self.assertGreaterEqual(crack.reveal_progress, previous[id(crack)])
                self.assertLessEqual(crack.reveal_progress, 1)
                self.assertEqual(len(crack.points), lengths[id(crack)])
                previous[id(crack)] = crack.reveal_progress

    def test_reveal_saturates(self):
        crack = make_crack((0, 0), (1, 1), reveal_speed=0.3)
        for _ in range(5):
            crack.reveal()
        self.assertEqual(crack.reveal_progress, 1)

    def test_scroll_boost_lasts_one_tick(self):
        background = make_background(scroll_sensitivity=1.0)
        crack = make_crack((10, 10), (20, 20), reveal_speed=0.01)
        background.state.cracks.add(crack)
        background.controller.on_scroll(1000)
        background.tick()
        self.assertAlmostEqual(crack.reveal_progress, 0.03)
        self.assertEqual(background.state.growth_boost, 0)
        background.tick()
        self.assertAlmostEqual(crack.reveal_progress, 0.04)

    def test_visible_points(self):
        crack = make_crack(*[(i, i) for i in range(10)])
        self.assertEqual(len(crack.visible_points()), 1)
        crack.reveal_progress = 0.55
        self.assertEqual(len(crack.visible_points()), 5)
        crack.reveal_progress = 1
        self.assertEqual(len(crack.visible_points()), 10)


class TestAutonomousCracks(unittest.TestCase):

    def test_no_crack_before_interval(self):
        clock = FakeClock()
        background = make_background(clock=clock, crack_interval=2000)
        for _ in range(20):
            clock.now += 50
            background.tick()
        self.assertEqual(len(background.cracks), 0)

    def test_cracks_appear_over_time(self):
        clock = FakeClock()
        background = make_background(seed=4, clock=clock, crack_count=20)
        for _ in range(50):
            clock.now += 5000
            background.tick()
            self.assertLessEqual(len(background.cracks), 20)
        self.assertGreater(len(background.cracks), 0)
        self.assertEqual(background.state.last_crack_time, clock.now)


class TestSettings(unittest.TestCase):

    def test_trim_on_crack_count_update(self):
        background = make_background()
        cracks = [make_crack((i, 0), (i, 10)) for i in range(10)]
        for crack in cracks:
            background.state.cracks.add(crack)
        background.update_setting('crack_count', 5)
        self.assertEqual(background.cracks, cracks[5:])

        newest = make_crack((0, 0), (5, 5))
        background.state.cracks.add(newest)
        self.assertEqual(background.cracks, cracks[6:] + [newest])

    def test_injection_settings_apply_to_live_injections(self):
        background = make_background()
        background.controller.on_click((10, 10))
        background.update_setting('injection_radius', 40)
        background.update_setting('injection_speed', 3)
        injection = background.injections[0]
        self.assertEqual(injection.max_radius, 40)
        self.assertEqual(injection.speed, 3)
        background.tick()
        self.assertEqual(injection.radius, 3)

    def test_scroll_sensitivity_is_clamped(self):
        background = make_background()
        background.update_setting('scroll_sensitivity', 5)
        self.assertEqual(background.settings.scroll_sensitivity, 1.0)

    def test_invalid_settings(self):
        background = make_background()
        with self.assertRaises(ValueError):
            background.update_setting('colour', 'red')
        with self.assertRaises(ValueError):
            background.update_setting('low_quality', True)
        with self.assertRaises(ValueError):
            background.update_setting('crack_count', 0)
        with self.assertRaises(ValueError):
            BackgroundSettings(crack_count=0)

    def test_low_quality_defaults(self):
        settings = BackgroundSettings(low_quality=True)
        self.assertEqual(settings.crack_count, 28)
        self.assertEqual(settings.crack_interval, 4000)


class TestRendering(unittest.TestCase):

    def test_frame_is_painted(self):
        background = make_background()
        crack = make_crack((100, 100), (300, 100), width=3.0, reveal_speed=1.0)
        background.state.cracks.add(crack)
        background.controller.on_click((600, 400))
        for _ in range(20):
            background.tick()

        surface = background.surface
        for channel, expected in zip(tuple(surface.get_at((799, 0)))[:3], display.BACKGROUND_COLOR):
            self.assertAlmostEqual(channel, expected, delta=2)
        self.assertNotEqual(tuple(surface.get_at((600, 400)))[:3], display.BACKGROUND_COLOR)
        self.assertNotEqual(tuple(surface.get_at((200, 100)))[:3], display.BACKGROUND_COLOR)

    def test_filled_crack_is_drawn(self):
        background = make_background(seed=2)
        crack = make_crack((100, 100), (101, 100), (300, 100), width=2.0, reveal_speed=1.0)
        background.state.cracks.add(crack)
        crack.points[1].filled = True
        crack.points[2].filled = True
        background.tick()
        self.assertNotEqual(tuple(background.surface.get_at((200, 100)))[:3], display.BACKGROUND_COLOR)

    def test_pointer_on_point_renders(self):
        background = make_background()
        crack = make_crack((100, 100), (200, 100), reveal_speed=1.0)
        background.state.cracks.add(crack)
        background.controller.on_pointer_move((100, 100))
        self.assertTrue(background.tick())
        self.assertEqual(crack.points[0].pos, (100, 100))

    def test_overlapping_injections_blend(self):
        surface = pygame.Surface((200, 200), pygame.SRCALPHA)
        first = Injection(100, 100, max_radius=80, speed=1.5, particles=[])
        first.radius = 30
        first.draw(surface)
        alone = surface.get_at((100, 100)).a
        self.assertGreater(alone, 0)

        second = Injection(120, 100, max_radius=80, speed=1.5, particles=[])
        second.radius = 30
        second.draw(surface)
        self.assertGreater(surface.get_at((100, 100)).a, alone)

    def test_low_quality_renders_without_shading(self):
        background = make_background(low_quality=True)
        with mock.patch.object(background_module, 'render', wraps=background_module.render) as render:
            background.tick()
        self.assertFalse(render.call_args.kwargs['shading'])

        background = make_background()
        with mock.patch.object(background_module, 'render', wraps=background_module.render) as render:
            background.tick()
        self.assertTrue(render.call_args.kwargs['shading'])

    def test_rendering_leaves_geometry_untouched(self):
        def grow(render_frames):
            clock = FakeClock()
            background = make_background(seed=11, populate=True, clock=clock)
            for _ in range(30):
                clock.now += 500
                if render_frames:
                    background.tick()
                else:
                    with mock.patch.object(background_module, 'render'):
                        background.tick()
            return [[point.pos for point in crack.points] for crack in background.cracks]

        self.assertEqual(grow(True), grow(False))


class TestCrackShading(unittest.TestCase):
    """Shadow and highlight strokes of a single crack."""

    def draw(self, width, pointer=(0.0, 0.0), shadow=True):
        crack = make_crack((100, 300), (400, 300), width=width)
        crack.reveal_progress = 1.0
        layer = pygame.Surface((500, 500), pygame.SRCALPHA)
        shadow_layer = None
        if shadow:
            shadow_layer = pygame.Surface((500, 500))
            shadow_layer.fill((255, 255, 255))
        crack.draw(layer, shadow_layer, pointer, random.Random(0))
        return crack, layer, shadow_layer

    def shaded_rows(self, shadow_layer):
        return [y for y in range(290, 311) if tuple(shadow_layer.get_at((250, y)))[:3] != (255, 255, 255)]

    def test_wide_crack_has_shadow_and_highlight(self):
        _, layer, shadow_layer = self.draw(3.0)
        column = [tuple(layer.get_at((250, y)))[:3] for y in range(296, 305)]
        self.assertIn((60, 60, 60), column)
        self.assertTrue(self.shaded_rows(shadow_layer))

    def test_medium_crack_has_shadow_only(self):
        _, layer, shadow_layer = self.draw(1.4)
        column = [tuple(layer.get_at((250, y)))[:3] for y in range(296, 305)]
        self.assertNotIn((60, 60, 60), column)
        self.assertTrue(self.shaded_rows(shadow_layer))

    def test_thin_crack_is_not_shaded(self):
        _, layer, shadow_layer = self.draw(1.0)
        self.assertEqual(self.shaded_rows(shadow_layer), [])
        self.assertGreater(layer.get_at((250, 300)).a, 0)

    def test_no_shadow_layer_still_draws_stroke(self):
        _, layer, _ = self.draw(3.0, shadow=False)
        self.assertGreater(layer.get_at((250, 300)).a, 0)

    def test_pointer_pushes_stroke_away(self):
        crack, layer, _ = self.draw(1.0, pointer=(100.0, 330.0), shadow=False)
        # The start point is pushed 2.8px up, away from the pointer below it
        self.assertEqual(layer.get_at((100, 300)).a, 0)
        self.assertTrue(any(layer.get_at((100, y)).a > 0 for y in range(296, 299)))
        self.assertEqual(crack.points[0].pos, (100, 300))
        self.assertEqual(crack.points[1].pos, (400, 300))


class TestDispose(unittest.TestCase):

    def test_tick_after_dispose_is_noop(self):
        background = make_background(seed=8, populate=True)
        self.assertTrue(background.tick())
        background.dispose()
        self.assertTrue(background.disposed)
        self.assertFalse(background.tick())
        self.assertEqual(background.cracks, [])
        self.assertEqual(background.injections, [])
        background.dispose()

    def test_input_after_dispose_is_ignored(self):
        background = make_background()
        controller = background.controller
        background.dispose()

        controller.on_pointer_down((100, 100))
        controller.on_pointer_move((120, 100))
        controller.on_pointer_up((120, 100))
        controller.on_click((300, 300))
        for i in range(1, 100):
            controller.on_scroll(i * 500)
        controller.on_resize((320, 240))

        self.assertIsNone(controller.add_injection((10, 10)))
        self.assertEqual(background.injections, [])
        self.assertEqual(background.cracks, [])
        self.assertEqual(background.state.size, (800, 600))
        self.assertEqual(background.state.growth_boost, 0.0)

    def test_regenerate_after_dispose_is_noop(self):
        background = make_background()
        background.dispose()
        background.regenerate()
        self.assertEqual(background.cracks, [])

    def test_resize_to_new_surface(self):
        background = make_background()
        background.resize(pygame.Surface((320, 240)))
        self.assertEqual(background.state.size, (320, 240))
        self.assertTrue(background.tick())


class TestCrackModel(unittest.TestCase):

    def test_points_are_immutable_sequence(self):
        crack = make_crack((0, 0), (1, 1))
        self.assertIsInstance(crack.points, tuple)
        self.assertEqual(crack.coordinates.shape, (2, 2))
        self.assertIsInstance(crack, Crack)


if __name__ == "__main__":
    unittest.main()
