from distributor.distribution import Distribution, DistributionState
from distributor.merklizer import MerklizedDistribution, merklize
