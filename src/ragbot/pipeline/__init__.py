from ragbot.pipeline.answer import AnswerPipeline, combine_documents
from ragbot.pipeline.chat import ChatResult, ChatService
from ragbot.pipeline.prompts import PromptTemplates, load_prompts

__all__ = [
    "AnswerPipeline",
    "ChatResult",
    "ChatService",
    "PromptTemplates",
    "combine_documents",
    "load_prompts",
]
