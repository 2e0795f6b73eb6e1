from typing import TypedDict, Literal, Optional, List, Dict, Any

Action = Literal["BUY", "SELL", "HOLD"]
Timeframe = Literal["short-term", "medium-term", "long-term"]

class MarketCondition(TypedDict, total=False):
    vix: float
    vixTrend: str
    riskLevel: str
    tenYearYield: float
    twoYearYield: float

class Holding(TypedDict, total=False):
    symbol: str
    allocation: float
    weeklyPerformance: float
    navErosion: float

class RotationSignal(TypedDict, total=False):
    type: str
    symbol: str
    fromSymbol: str
    urgency: Literal["HIGH", "MEDIUM", "LOW"]
    reason: str

class PortfolioMetrics(TypedDict, total=False):
    sharpeRatio: float
    totalYield: float

class PortfolioState(TypedDict, total=False):
    marketCondition: MarketCondition
    metrics: PortfolioMetrics
    holdings: List[Holding]
    rotationSignals: List[RotationSignal]

class PositionLimits(TypedDict, total=False):
    maxSingleOptionETF: float
    maxCombinedOptionETFs: float
    idealIncomePieAllocation: float

class LimitExceeded(TypedDict, total=False):
    individualPositions: bool
    combinedOptionETFs: bool

class ActualAllocations(TypedDict, total=False):
    holdings: List[Holding]
    limitExceeded: LimitExceeded

class IncomePie(TypedDict):
    total: float
    FEPI: float
    SDTY: float
    QQQY: float

class ShortTermTreasury(TypedDict):
    total: float
    SHY: float

class TreasuryETF(TypedDict):
    total: float
    EDV: float

class AllocationPlan(TypedDict, total=False):
    incomePie: IncomePie
    shortTermTreasury: ShortTermTreasury
    treasuryETF: TreasuryETF
    note: str

class Recommendation(TypedDict):
    action: Action
    symbol: str
    timeframe: Timeframe
    conviction: int
    rationale: str
    targetPrice: Optional[float]
    stopLoss: Optional[float]

class AgentOutput(TypedDict):
    summary: str
    analysis: str
    confidence: float
    recommendations: List[Recommendation]
    risks: List[str]
    metrics: Dict[str, Any]

class AgentInput(TypedDict, total=False):
    symbol: str
    stockData: List[Dict[str, Any]]
    portfolioState: PortfolioState
    actualAllocations: ActualAllocations
    positionLimits: PositionLimits

class PriceTargets(TypedDict):
    bullish: float
    base: float
    bearish: float

class AnalysisReport(TypedDict):
    symbol: str
    timestamp: int
    fundamentalAnalysis: AgentOutput
    technicalAnalysis: AgentOutput
    sentimentAnalysis: AgentOutput
    macroAnalysis: AgentOutput
    finalRecommendation: str
    confidence: float
    risks: List[str]
    supportLevels: List[float]
    resistanceLevels: List[float]
    priceTargets: Optional[PriceTargets]
    shortTermOutlook: Optional[str]
    longTermOutlook: Optional[str]
    positionStatus: Dict[str, str]
