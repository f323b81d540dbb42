"""Token sampling subsystem for localchat.

Top-k categorical sampling driven by an injectable uniform randomness source.
"""

from localchat.sampling.sampler import TopKSampler, sample_top_k
from localchat.sampling.types import SampleResult, TopKCandidate

__all__ = [
    "SampleResult",
    "TopKCandidate",
    "TopKSampler",
    "sample_top_k",
]
