from .gateway import LLMGateway, MessagesGateway, OpenAIGateway, build_gateway

__all__ = ["LLMGateway", "MessagesGateway", "OpenAIGateway", "build_gateway"]
