from .types import AgentInput, AgentOutput

class AnalysisAgent:
    def analyze(self, input: AgentInput) -> AgentOutput:
        raise NotImplementedError
