from checkout.fees.orchestrator import FeeOrchestrator, matching_tier

__all__ = ["FeeOrchestrator", "matching_tier"]
