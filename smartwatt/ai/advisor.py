"""Energy advisor — LCEL chains that send prompts to the chat model."""

import json

from langchain_core.language_models import BaseLanguageModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from smartwatt.ai.prompts import DEVICE_TIPS_PROMPT_TEMPLATE, RECOMMENDATION_PROMPT_TEMPLATE


class EnergyAdvisor:
    """Thin wrapper over the chat model; returns the raw reply text."""

    def __init__(self, llm: BaseLanguageModel):
        self.llm = llm
        self._recommendation_chain = (
            ChatPromptTemplate.from_template(RECOMMENDATION_PROMPT_TEMPLATE)
            | llm
            | StrOutputParser()
        )
        self._tips_chain = (
            ChatPromptTemplate.from_template(DEVICE_TIPS_PROMPT_TEMPLATE)
            | llm
            | StrOutputParser()
        )

    def recommend(
        self,
        budget: float,
        used_budget: float,
        remaining_budget: float,
        current_devices: list[dict],
        available_devices: list[dict],
    ) -> str:
        return self._recommendation_chain.invoke({
            "budget": budget,
            "used_budget": used_budget,
            "remaining_budget": remaining_budget,
            "current_devices": json.dumps(current_devices),
            "available_devices": json.dumps(available_devices),
        })

    def device_tips(self, device_name: str, watts_options: list[int], works_all_day: bool) -> str:
        return self._tips_chain.invoke({
            "device_name": device_name,
            "watts_options": json.dumps(watts_options),
            "works_all_day": str(works_all_day).lower(),
        })
