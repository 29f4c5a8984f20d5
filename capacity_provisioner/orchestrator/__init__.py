from ._orchestrator import Orchestrator as Orchestrator
