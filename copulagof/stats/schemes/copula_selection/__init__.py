"""
Copula family selection by pairwise Vuong and Clarke comparisons.

**Module Organization:**

- `families`: Family codes, parameter counts and rotation blocks
- `core`: Validated sample and design (`prepare_sample`, `GofDesign`)
- `evaluator`: Family registry and log-likelihood evaluation
- `allpairs`: One reference family against every candidate
- `score`: Score aggregation and the score matrix
- `statistics`: Ledger components (recorder, criteria, score signaler)
- `experiments`: The experiment template driving a full run

Example Usage
-------------
>>> from copulagof.backends.polars.ledger import PolarsLedger
>>> from copulagof.stats.schemes.copula_selection import (
...     FamilyRegistry, VuongClarkeExperiment, prepare_design, prepare_sample)
>>> sample = prepare_sample([0.1, 0.3, 0.6, 0.8], [0.2, 0.1, 0.7, 0.9])
>>> design = prepare_design(sample, familyset=[0])
>>> exp = VuongClarkeExperiment("gof#1", sample, design, FamilyRegistry.with_defaults())
>>> exp.setup(PolarsLedger())
>>> exp.analyze().families
(0,)
"""

from copulagof.stats.schemes.copula_selection.allpairs import (
    ReferenceComparison,
    compare_reference,
)
from copulagof.stats.schemes.copula_selection.core import (
    CopulaSample,
    GofDesign,
    prepare_design,
    prepare_familyset,
    prepare_sample,
)
from copulagof.stats.schemes.copula_selection.evaluator import (
    CopulaFamily,
    FamilyEvaluationError,
    FamilyRegistry,
    IndependenceCopula,
    ModelEvaluator,
)
from copulagof.stats.schemes.copula_selection.experiments import (
    VuongClarkeExperiment,
)
from copulagof.stats.schemes.copula_selection.score import ScoreMatrix, aggregate_score

__all__ = [
    "CopulaFamily",
    "CopulaSample",
    "FamilyEvaluationError",
    "FamilyRegistry",
    "GofDesign",
    "IndependenceCopula",
    "ModelEvaluator",
    "ReferenceComparison",
    "ScoreMatrix",
    "VuongClarkeExperiment",
    "aggregate_score",
    "compare_reference",
    "prepare_design",
    "prepare_familyset",
    "prepare_sample",
]
