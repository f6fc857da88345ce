"""Tests for edc_lm.physics.turbulent_combustion.turbulent_combustion."""

from absl.testing import parameterized
from edc_lm.physics.combustion import onestep
from edc_lm.physics.turbulent_combustion import edc
from edc_lm.physics.turbulent_combustion import turbulent_combustion
import tensorflow as tf


class TurbulentCombustionTest(tf.test.TestCase, parameterized.TestCase):

  def setUp(self):
    super(TurbulentCombustionTest, self).setUp()

    self.thermo = onestep.OneStepChemistry(
        a_cst=2.0, coeff_f=1.0, coeff_o=2.0, e_a=8314.0, q=300.0, w_f=0.016,
        w_o=0.032)

  @parameterized.parameters('EDC', 'StoR')
  def testEdcIsCreated(self, model_name):
    """Checks that the EDC closure is created under both of its names."""
    model = turbulent_combustion.turbulent_combustion_model_factory(
        model_name, self.thermo, {'version': 'v1996'})

    self.assertIsInstance(model, edc.EddyDissipationConcept)
    self.assertIs(self.thermo, model.thermo)

  def testNoModelGivesNone(self):
    """Checks that no model is created without a model name."""
    self.assertIsNone(
        turbulent_combustion.turbulent_combustion_model_factory(
            None, self.thermo, {}))

  def testUnknownModelRaises(self):
    """Checks that unknown models are rejected with the available options."""
    with self.assertRaisesRegex(NotImplementedError, 'laminar.*EDC'):
      turbulent_combustion.turbulent_combustion_model_factory(
          'laminar', self.thermo, {})


if __name__ == '__main__':
  tf.test.main()
