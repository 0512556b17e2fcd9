import math
import unittest

import numpy as np

from funcsamp.core.integrands import (
    DEFAULT_CATALOG,
    Integrand,
    IntegrandCatalog,
    IntegrandCategory,
    Projection,
    get_integrand,
    lookup,
)
from funcsamp.core.validator import UnknownIntegrand
from funcsamp.models.samples import Point


class IntegrandCatalogTests(unittest.TestCase):
    def setUp(self) -> None:
        rng = np.random.default_rng(7)
        self.points = [Point(float(x), float(y)) for x, y in rng.random((64, 2))]

    def test_catalog_lists_all_functions_in_order(self) -> None:
        names = DEFAULT_CATALOG.names()
        self.assertEqual(len(names), 18)
        self.assertEqual(names[0], "quarterdisk")
        self.assertEqual(names[-1], "sin2x")

    def test_lookup_returns_evaluator_and_reference(self) -> None:
        evaluate, reference = lookup("bilinear")
        self.assertEqual(reference, 0.25)
        self.assertAlmostEqual(evaluate(Point(0.5, 0.4)), 0.2)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaises(UnknownIntegrand) as ctx:
            lookup("nosuchfunction")
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertIn("nosuchfunction", str(ctx.exception))

    def test_evaluation_is_deterministic(self) -> None:
        for integrand in DEFAULT_CATALOG:
            for point in self.points[:8]:
                self.assertEqual(integrand.evaluate(point), integrand.evaluate(point), integrand.name)

    def test_vectorised_matches_scalar(self) -> None:
        xs = np.array([p.x for p in self.points])
        ys = np.array([p.y for p in self.points])
        for integrand in DEFAULT_CATALOG:
            many = np.asarray(integrand.evaluate_many(xs, ys), dtype=float)
            scalar = np.array([integrand.evaluate(p) for p in self.points])
            np.testing.assert_allclose(many, scalar, rtol=1e-14, atol=1e-15, err_msg=integrand.name)

    def test_indicators_take_values_zero_or_one(self) -> None:
        for integrand in DEFAULT_CATALOG:
            if integrand.category is not IntegrandCategory.DISCONTINUOUS:
                continue
            values = {integrand.evaluate(p) for p in self.points}
            self.assertTrue(values <= {0.0, 1.0}, integrand.name)

    def test_sininvr_is_defined_at_origin(self) -> None:
        integrand = get_integrand("sininvr")
        self.assertEqual(integrand.evaluate(Point(0.0, 0.0)), 1.0)
        self.assertAlmostEqual(integrand.evaluate(Point(0.5, 0.0)), math.sin(2.0 * math.pi))

    def test_one_dimensional_integrands_project_a_single_coordinate(self) -> None:
        lineary = get_integrand("lineary")
        self.assertIs(lineary.projection, Projection.Y)
        self.assertEqual(lineary.dimension, 1)
        self.assertEqual(lineary.evaluate(Point(0.9, 0.3)), 0.3)

        stepx = get_integrand("stepx")
        self.assertEqual(stepx.evaluate(Point(0.2, 0.9)), 1.0)
        self.assertEqual(stepx.evaluate(Point(0.5, 0.0)), 0.0)
        self.assertAlmostEqual(stepx.reference, 1.0 / math.pi)

    def test_ramps_fall_off_linearly(self) -> None:
        self.assertAlmostEqual(get_integrand("quarterdiskramp").evaluate(Point(0.8, 0.0)), 0.5)
        self.assertEqual(get_integrand("quarterdiskramp").evaluate(Point(0.1, 0.1)), 1.0)
        self.assertAlmostEqual(get_integrand("fulldiskramp").evaluate(Point(0.9, 0.5)), 0.5)
        self.assertAlmostEqual(get_integrand("rampx").evaluate(Point(0.3, 0.7)), 0.5)
        self.assertEqual(get_integrand("triangleramp").evaluate(Point(0.0, 0.0)), 0.5)
        self.assertEqual(get_integrand("triangleramp").evaluate(Point(0.0, 0.2)), 1.0)
        self.assertEqual(get_integrand("triangleramp").evaluate(Point(0.9, 0.0)), 0.0)

    def test_points_outside_unit_square_pass_through(self) -> None:
        self.assertEqual(get_integrand("bilinear").evaluate(Point(2.0, -1.5)), -3.0)

    def test_custom_catalog_registration(self) -> None:
        catalog = IntegrandCatalog()
        constant = Integrand("constant", lambda x, y: x * 0.0 + 1.0, 1.0, IntegrandCategory.SMOOTH)
        catalog.register(constant)
        self.assertIn("constant", catalog)
        self.assertIs(get_integrand("constant", catalog), constant)
        with self.assertRaises(ValueError):
            catalog.register(constant)
        with self.assertRaises(UnknownIntegrand):
            lookup("bilinear", catalog)


if __name__ == "__main__":
    unittest.main()
