"""
copulagof.stats.common.tags
===========================

Ledger tags and payload type names used by the model-comparison procedure.

Keeping them in one place lets writers (statistics, criteria, signalers) and
readers (score extraction, reporting) agree on the exact strings.
"""

from typing import Dict

# Statistics tags
VUONG_TAG = "stat:vuong"
CLARKE_TAG = "stat:clarke"
FIT_TAG = "stat:fit"

# Criteria tags
NORMAL_CRITICAL_TAG = "crit:normal"

# Signal topics and tags
SCORE_TOPIC = "gof:score"
SCORE_TAG = "gof:score"

# Payload types
PAIRWISE_PAYLOAD = "PairwiseTest"
FIT_PAYLOAD = "FamilyFit"
DESIGN_PAYLOAD = "GofDesign"
CRITICAL_PAYLOAD = "CriticalValue"

# Test name -> statistics tag
TEST_TAGS: Dict[str, str] = {"vuong": VUONG_TAG, "clarke": CLARKE_TAG}
