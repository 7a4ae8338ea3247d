"""
Example datasets for the design matrix walkthroughs.

Both are small mouse experiments:

weight_genotype
    4 control and 4 mutant mice; does size depend on genotype once weight
    is accounted for?  Model: Size ~ Type + Weight.

batch_effect
    The control/mutant experiment repeated in two labs (batches A and B),
    3 mice per group per lab; gene expression is measured.
    Model: Gene_Expression ~ Lab + Type.
"""

import numpy as np

from pydesignmatrix.core.frame import ModelFrame

# Weight in g, size in cm; first 4 control, last 4 mutant
WEIGHT_GENOTYPE_TYPE = np.array(["Control"] * 4 + ["Mutant"] * 4)
WEIGHT_GENOTYPE_WEIGHT = np.array([67.2, 98.0, 123.2, 137.2, 47.6, 78.4, 89.6, 109.2])
WEIGHT_GENOTYPE_SIZE = np.array([4.75, 7.50, 7.25, 9.25, 7.00, 8.25, 9.75, 12.00])

# Two labs x (3 control, 3 mutant)
BATCH_EFFECT_LAB = np.array(["A"] * 6 + ["B"] * 6)
BATCH_EFFECT_TYPE = np.array((["Control"] * 3 + ["Mutant"] * 3) * 2)
BATCH_EFFECT_EXPRESSION = np.array([
    1.7, 2.0, 2.2,
    3.1, 3.6, 3.9,
    0.9, 1.2, 1.9,
    1.8, 2.2, 2.9,
])


def weight_genotype() -> ModelFrame:
    """ModelFrame with Type (Control/Mutant), Weight and Size for 8 mice."""
    return ModelFrame.from_columns(
        Type=WEIGHT_GENOTYPE_TYPE,
        Weight=WEIGHT_GENOTYPE_WEIGHT,
        Size=WEIGHT_GENOTYPE_SIZE,
    )


def batch_effect() -> ModelFrame:
    """ModelFrame with Lab (A/B), Type (Control/Mutant) and Gene_Expression for 12 mice."""
    return ModelFrame.from_columns(
        Lab=BATCH_EFFECT_LAB,
        Type=BATCH_EFFECT_TYPE,
        Gene_Expression=BATCH_EFFECT_EXPRESSION,
    )
