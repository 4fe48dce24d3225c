from mavilda.conversation.analyzer import Intent, MessageAnalysis, analyze_message
from mavilda.conversation.stages import ConversationStage, advance_stage

__all__ = [
    "Intent",
    "MessageAnalysis",
    "analyze_message",
    "ConversationStage",
    "advance_stage",
]
