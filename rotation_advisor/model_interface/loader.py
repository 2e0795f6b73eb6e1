import importlib, os
from .analysis_agent import AnalysisAgent

def load_summary_agent() -> AnalysisAgent:
    modpath = os.getenv("SUMMARY_AGENT_MODULE")
    if not modpath:
        from rotation_advisor.model_impl.summary_agent import NaturalLanguageSummaryAgent
        return NaturalLanguageSummaryAgent()
    mod, factory = modpath.split(":")
    return getattr(importlib.import_module(mod), factory)()
