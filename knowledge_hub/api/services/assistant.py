"""
Assistant service - forwards user questions to the LLM with the Hugo persona

Each call is independent: no conversation state is kept between requests.
"""

import logging

from knowledge_hub.llm import llm_complete

from ..errors import UpstreamFailure

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are **Hugo**, a friendly and professional assistant specialized ONLY in Cognos Analytics.

LANGUAGE RULES
- Always answer in the SAME language the user used in their LAST message.
- If the user explicitly asks to switch languages (e.g. "speak English", "habla español"), then switch and continue in that language.
- Do NOT mix languages in the same answer unless the user clearly asks you to.

SCOPE RULES
- You ONLY help with Cognos Analytics topics: XQE, dispatcher, gateway, content manager, CAF, JDBC/ODBC, namespaces, security, logging, reports, dashboards, data sources, configuration, installation, upgrades, performance, troubleshooting, architecture, etc.
- If the question is clearly about something NOT related to Cognos (for example: viajes, comida, películas, clima, vida personal, etc.), answer:
  "Lo siento, solo puedo ayudarte con temas relacionados a Cognos Analytics."
- BUT if the user says something general like "I need help", "necesito ayuda", "I have a question", etc., assume they want help with Cognos and reply asking what issue they have with Cognos Analytics.

IDENTITY
- When the user asks who you are, briefly introduce yourself as Hugo, an assistant specialized in Cognos Analytics, using the same language the user is using.

STYLE
- Be clear, concise, friendly and practical.
- When useful, provide step-by-step troubleshooting and mention relevant logs/config files or components.
""".strip()


class AssistantService:
    """
    Stateless proxy to the upstream chat completion provider
    """

    def __init__(self, system_prompt: str = SYSTEM_PROMPT):
        self.system_prompt = system_prompt

    def ask(self, message: str) -> str:
        """
        Send one user message and return the reply text verbatim

        Raises:
            UpstreamFailure: provider error, timeout or missing credentials
        """
        result = llm_complete(message, system=self.system_prompt)

        if result["status"] != "ok":
            logger.error(
                "Assistant call failed (provider=%s, status=%s, latency=%sms)",
                result["provider"],
                result["status"],
                result["latency_ms"],
            )
            raise UpstreamFailure(
                "Error communicating with Hugo",
                detail=f"{result['status']}: {result['error']}",
            )

        logger.info(
            "Assistant replied (model=%s, tokens_in=%s, tokens_out=%s, latency=%sms)",
            result["model"],
            result["tokens_in"],
            result["tokens_out"],
            result["latency_ms"],
        )
        return result["text"]


# Global assistant service instance
assistant_service = AssistantService()


def get_assistant_service() -> AssistantService:
    """Get the assistant service instance (FastAPI dependency)"""
    return assistant_service
