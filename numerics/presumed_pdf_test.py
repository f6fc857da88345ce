"""Tests for edc_lm.numerics.presumed_pdf."""

import itertools

from absl.testing import parameterized
import numpy as np
from scipy import integrate
from edc_lm.numerics import presumed_pdf
from edc_lm.utility import errors
import tensorflow as tf

_NAMES = presumed_pdf.SUPPORTED_DISTRIBUTIONS
_BOUNDS = ((-3.0, 3.0), (-1.0, 0.5), (0.0, 1.0), (1.5, 2.5))


class PresumedPdfTest(tf.test.TestCase, parameterized.TestCase):

  def setUp(self):
    super(PresumedPdfTest, self).setUp()
    self.pdf = presumed_pdf.PresumedPDF()

  def testNormalizeComputesAffineMapping(self):
    """Checks the normalization and its inverse."""
    norm_phi = self.pdf.normalize(1500.0, 1200.0, 100.0)

    self.assertAllClose(3.0, norm_phi)
    self.assertAllClose(1500.0, self.pdf.denormalize(norm_phi, 1200.0, 100.0))

  @parameterized.parameters(0.0, -1.0)
  def testNormalizeRaisesForNonPositiveSigma(self, sigma):
    """Checks that a non-positive spread is rejected."""
    with self.assertRaises(errors.InvalidInputError):
      self.pdf.normalize(1.0, 0.5, sigma)

  def testUnknownDistributionRaises(self):
    """Checks that every operation rejects an unknown family."""
    with self.subTest(name='Density'):
      with self.assertRaisesRegex(errors.UnsupportedDistributionError, 'beta'):
        self.pdf.density(0.0, 'beta')
    with self.subTest(name='Cumulative'):
      with self.assertRaises(errors.UnsupportedDistributionError):
        self.pdf.cumulative(0.0, 'beta', -1.0, 1.0)
    with self.subTest(name='Zones'):
      with self.assertRaises(errors.UnsupportedDistributionError):
        self.pdf.compute_zone_probabilities(0.5, -1.0, 1.0, 'beta')
    with self.subTest(name='DistributionSpec'):
      with self.assertRaises(errors.UnsupportedDistributionError):
        presumed_pdf.DistributionSpec('beta')

  @parameterized.parameters((1.0, 1.0), (2.0, -1.0))
  def testInvalidTruncationBoundsRaise(self, left, right):
    """Checks that unordered truncation bounds are rejected."""
    with self.assertRaises(errors.InvalidTruncationBoundsError):
      self.pdf.cumulative(0.0, 'normal', left, right)
    with self.assertRaises(errors.InvalidTruncationBoundsError):
      self.pdf.compute_zone_values(0.5, left, right, 'normal')

  @parameterized.parameters(0.0, -0.25)
  def testNonPositiveZoneWidthRaises(self, span):
    """Checks that a zone width that is not positive is rejected."""
    with self.assertRaises(errors.InvalidTruncationBoundsError):
      self.pdf.compute_zone_probabilities(span, 0.0, 1.0, 'uniform')

  @parameterized.parameters(*itertools.product(_NAMES, _BOUNDS))
  def testTruncatedCumulativeIsZeroAtLeftAndOneAtRight(self, name, bounds):
    """Checks the end points of the truncated cumulative probability."""
    left, right = bounds

    self.assertAllClose(0.0, self.pdf.cumulative(left, name, left, right))
    self.assertAllClose(1.0, self.pdf.cumulative(right, name, left, right))

  @parameterized.parameters(*_NAMES)
  def testCumulativeIsMonotonic(self, name):
    """Checks that the cumulative probability never decreases."""
    x = np.linspace(-4.0, 4.0, 81)

    with self.subTest(name='Full'):
      self.assertTrue(np.all(np.diff(self.pdf.cumulative(x, name)) >= 0.0))
    with self.subTest(name='Truncated'):
      cdf = self.pdf.cumulative(x, name, -2.0, 1.0)
      self.assertTrue(np.all(np.diff(cdf) >= 0.0))
      self.assertTrue(np.all((cdf >= 0.0) & (cdf <= 1.0)))

  @parameterized.parameters(*_NAMES)
  def testTruncatedDensityIntegratesToOne(self, name):
    """Checks the renormalization of the truncated density."""
    x = np.linspace(-1.0, 1.5, 20001)

    integral = integrate.trapezoid(self.pdf.density(x, name, -1.0, 1.5), x)

    self.assertAllClose(1.0, integral, atol=1e-4)
    self.assertAllClose(0.0, self.pdf.density(2.0, name, -1.0, 1.5))

  def testDensityOfStandardFamilies(self):
    """Checks the untruncated densities at the mean."""
    self.assertAllClose(1.0 / np.sqrt(2.0 * np.pi),
                        self.pdf.density(0.0, 'normal'))
    self.assertAllClose(1.0 / (2.0 * np.sqrt(3.0)),
                        self.pdf.density(0.0, 'uniform'))
    self.assertAllClose(1.0 / np.sqrt(2.0), self.pdf.density(0.0, 'laplace'))

  @parameterized.parameters(*_NAMES)
  def testZoneExpectationMatchesNumericalIntegration(self, name):
    """Checks the closed-form partial moments against quadrature."""
    a, b = -0.7, 1.1
    x = np.linspace(a, b, 20001)
    f = self.pdf.density(x, name)
    expected = integrate.trapezoid(x * f, x) / integrate.trapezoid(f, x)

    self.assertAllClose(expected, self.pdf.zone_expectation(a, b, name),
                        atol=1e-6)

  def testExpectationOfSymmetricDistributionBelowMeanIsNegative(self):
    """Checks the untruncated conditional mean of a normal distribution."""
    # E[x | x <= 0] = -sqrt(2 / pi) for the standard normal distribution.
    self.assertAllClose(-np.sqrt(2.0 / np.pi),
                        self.pdf.expectation(0.0, 'normal'))
    # A uniform distribution has no mass below its support.
    self.assertAllClose(-5.0, self.pdf.expectation(-5.0, 'uniform'))

  def testTruncatedExpectationOverFullIntervalIsSymmetric(self):
    """Checks the conditional mean of a symmetrically truncated normal."""
    self.assertAllClose(0.0, self.pdf.expectation(2.0, 'normal', -2.0, 2.0),
                        atol=1e-12)

  def testUniformZonesAreEquallyProbableWithMidpointValues(self):
    """Checks four quarter zones of the uniform distribution on [0, 1]."""
    probabilities = self.pdf.compute_zone_probabilities(0.25, 0.0, 1.0,
                                                        'uniform')
    values = self.pdf.compute_zone_values(0.25, 0.0, 1.0, 'uniform')

    self.assertLen(probabilities, 4)
    self.assertAllClose([0.25, 0.25, 0.25, 0.25], probabilities)
    self.assertAllClose([0.125, 0.375, 0.625, 0.875], values)

  @parameterized.parameters(*itertools.product(_NAMES, (0.5, 0.25, 0.1)))
  def testZoneProbabilitiesSumToOneForEvenlyDividedInterval(self, name, span):
    """Checks the normalization of the zone probabilities."""
    probabilities = self.pdf.compute_zone_probabilities(span, -3.0, 3.0, name)

    self.assertLen(probabilities, int(round(6.0 / span)))
    self.assertTrue(np.all(probabilities >= 0.0))
    self.assertAllClose(1.0, np.sum(probabilities))

  @parameterized.parameters(*_NAMES)
  def testLastZoneIsClippedForUnevenlyDividedInterval(self, name):
    """Checks the partial last zone when the width does not divide evenly."""
    edges = presumed_pdf.zone_edges(0.3, -1.0, 1.0)
    probabilities = self.pdf.compute_zone_probabilities(0.3, -1.0, 1.0, name)
    values = self.pdf.compute_zone_values(0.3, -1.0, 1.0, name)

    self.assertAllClose([-1.0, -0.7, -0.4, -0.1, 0.2, 0.5, 0.8, 1.0], edges)
    self.assertLen(probabilities, 7)
    self.assertLessEqual(np.sum(probabilities), 1.0 + 1e-12)
    self.assertTrue(np.all((values >= edges[:-1]) & (values <= edges[1:])))

  def testZoneCountWithClippedLastZone(self):
    """Checks that a remainder adds one clipped zone."""
    edges = presumed_pdf.zone_edges(0.3, 0.0, 1.0)

    self.assertAllClose([0.0, 0.3, 0.6, 0.9, 1.0], edges)

  def testZonesOutsideTheSupportHaveZeroProbability(self):
    """Checks zones of the uniform distribution beyond its support."""
    stats = self.pdf.zone_statistics(
        presumed_pdf.DistributionSpec('uniform', left=-3.0, right=3.0), 1.0)

    self.assertEqual(stats.num_zones, 6)
    self.assertAllClose(0.0, stats.probabilities[0])
    self.assertAllClose(0.0, stats.probabilities[-1])
    # The fallback value of an empty zone is its midpoint.
    self.assertAllClose(-2.5, stats.values[0])
    self.assertAllClose(2.5, stats.values[-1])
    self.assertAllClose(1.0, np.sum(stats.probabilities))
    self.assertEqual(self.pdf.num_degenerate, 0)

  def testTruncationWithoutMassFallsBackToUniform(self):
    """Checks the recovery when the truncated interval carries no mass."""
    probabilities = self.pdf.compute_zone_probabilities(1.0, 5.0, 7.0,
                                                        'uniform')
    values = self.pdf.compute_zone_values(1.0, 5.0, 7.0, 'uniform')

    self.assertAllClose([0.5, 0.5], probabilities)
    self.assertAllClose([5.5, 6.5], values)
    self.assertGreater(self.pdf.num_degenerate, 0)

  def testFarTailZonesAreFinite(self):
    """Checks that zones deep in the tail produce finite statistics."""
    stats = self.pdf.zone_statistics(
        presumed_pdf.DistributionSpec('normal', left=30.0, right=40.0), 2.0)

    self.assertTrue(np.all(np.isfinite(stats.probabilities)))
    self.assertTrue(np.all(np.isfinite(stats.values)))

  def testFarTailMassStaysInFirstZone(self):
    """Checks that a tiny but representable tail mass is not discarded."""
    stats = self.pdf.zone_statistics(
        presumed_pdf.DistributionSpec('normal', left=30.0, right=40.0), 1.0)

    self.assertEqual(10, stats.num_zones)
    self.assertAllClose(1.0, stats.probabilities[0], atol=1e-10)
    self.assertAllClose(np.zeros(9), stats.probabilities[1:], atol=1e-10)
    # The conditional mean of the tail beyond x is close to x + 1/x.
    self.assertAllClose(30.0 + 1.0 / 30.0, stats.values[0], atol=1e-3)
    self.assertEqual(self.pdf.num_degenerate, 0)

  def testDistributionSpecRejectsNonPositiveSigma(self):
    """Checks the validation of the distribution spread."""
    with self.assertRaises(errors.InvalidInputError):
      presumed_pdf.DistributionSpec('normal', mean=1.0, sigma=0.0)


if __name__ == '__main__':
  tf.test.main()
