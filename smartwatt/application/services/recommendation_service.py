"""AI recommendation service.

The model is only an enrichment: any failure (no key, network, timeout,
unparseable or malformed reply) degrades to the rule-based answer.
"""

from typing import Optional

import structlog

from smartwatt.ai.advisor import EnergyAdvisor
from smartwatt.ai.parsing import parse_recommendations, parse_tips
from smartwatt.application.services.home_device_service import budget_summary
from smartwatt.core.exceptions import EntityNotFoundException
from smartwatt.domain.energy import Affordability, filter_affordable, monthly_cost, safe_number
from smartwatt.domain.models.system_device import SystemDevice
from smartwatt.domain.models.user import User
from smartwatt.domain.schemas.device import SystemDeviceRead
from smartwatt.infrastructure.repositories.device_repository import (
    SQLAlchemyHomeDeviceRepository,
    SQLAlchemySystemDeviceRepository,
)

logger = structlog.get_logger(__name__)

MAX_RECOMMENDATIONS = 3
SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

FALLBACK_REASON = "This device fits within your remaining budget"

GENERIC_ENERGY_TIPS = [
    {
        "tip": "Turn off devices when not in use",
        "potentialSavings": "Up to 10% on your electricity bill",
        "relevantDevices": [],
    },
    {
        "tip": "Use energy-efficient settings on your appliances",
        "potentialSavings": "5-15% on device-specific consumption",
        "relevantDevices": [],
    },
    {
        "tip": "Consider upgrading to energy-efficient models for frequently used devices",
        "potentialSavings": "Up to 30% on specific device consumption",
        "relevantDevices": [],
    },
]


def fallback_recommendations(matches: list[Affordability], budget: dict) -> dict:
    """First three affordable catalog entries at their cheapest fitting wattage."""
    recommendations = [
        {
            "deviceId": m.device.id,
            "deviceName": m.device.name,
            "deviceImage": m.device.img,
            "recommendedWattage": m.affordable_wattage,
            "wattsOptions": m.device.watts_options,
            "deviceWorkAllDay": m.device.device_work_all_day,
            "reasonForRecommendation": FALLBACK_REASON,
            "estimatedMonthlyCost": m.monthly_cost,
            "estimatedSavings": 0,
        }
        for m in matches[:MAX_RECOMMENDATIONS]
    ]
    return {
        "recommendations": recommendations,
        "energySavingTips": [dict(tip) for tip in GENERIC_ENERGY_TIPS],
        "budget": budget,
        "source": SOURCE_FALLBACK,
    }


def _enrich(recommendation: dict, devices_by_id: dict[int, SystemDevice]) -> dict:
    device = devices_by_id.get(int(safe_number(recommendation.get("deviceId"), -1)))
    return {
        **recommendation,
        "deviceImage": device.img if device else None,
        "wattsOptions": device.watts_options if device else [],
        "deviceWorkAllDay": device.device_work_all_day if device else False,
    }


def get_ai_recommendations(
    catalog: SQLAlchemySystemDeviceRepository,
    home_devices: SQLAlchemyHomeDeviceRepository,
    user: User,
    advisor: Optional[EnergyAdvisor],
    cost_per_kwh: float,
) -> dict:
    budget = budget_summary(user)
    matches = filter_affordable(catalog.list_all(), budget["remaining"], cost_per_kwh)

    if advisor is None:
        logger.info("AI not configured, using fallback recommendations", user_id=user.id)
        return fallback_recommendations(matches, budget)

    current_devices = [
        {
            "id": d.system_device_id,
            "name": d.system_device.name,
            "wattage": d.chosen_watts,
            "workHours": d.hours_per_day,
            "isAllDay": d.is_all_day,
            "monthlyCost": monthly_cost(d.chosen_watts, d.hours_per_day, cost_per_kwh),
        }
        for d in home_devices.all_for_user(user.id)
    ]
    available_devices = [
        {
            "id": m.device.id,
            "name": m.device.name,
            "affordableWattage": m.affordable_wattage,
            "isAllDay": m.device.device_work_all_day,
            "monthlyCost": m.monthly_cost,
        }
        for m in matches
    ]

    try:
        reply = advisor.recommend(
            budget=budget["total"],
            used_budget=budget["used"],
            remaining_budget=budget["remaining"],
            current_devices=current_devices,
            available_devices=available_devices,
        )
        parsed = parse_recommendations(reply)
    except Exception as e:
        logger.warning("AI recommendations failed, using fallback", user_id=user.id, error=str(e))
        return fallback_recommendations(matches, budget)

    devices_by_id = {m.device.id: m.device for m in matches}
    return {
        "recommendations": [_enrich(r, devices_by_id) for r in parsed["deviceRecommendations"]],
        "energySavingTips": parsed["energySavingTips"],
        "budget": budget,
        "source": SOURCE_AI,
    }


def fallback_device_tips(device: SystemDevice) -> list[dict]:
    name = device.name
    return [
        {
            "tip": f"Use {name} during off-peak hours when electricity rates are lower",
            "potentialSavings": "10-15% cost reduction",
            "difficultyLevel": "Easy",
            "additionalBenefits": "Helps balance the electrical grid",
        },
        {
            "tip": f"Choose the lowest wattage setting that meets your needs for {name}",
            "potentialSavings": "5-20% energy reduction",
            "difficultyLevel": "Easy",
            "additionalBenefits": "Extends device lifespan",
        },
        {
            "tip": f"Perform regular maintenance on your {name} to ensure optimal efficiency",
            "potentialSavings": "Up to 10% energy savings",
            "difficultyLevel": "Medium",
            "additionalBenefits": "Improves performance and extends lifespan",
        },
        {
            "tip": (
                f"Consider using a smart plug to control your {name} and reduce standby power consumption"
                if device.device_work_all_day
                else f"Turn off your {name} completely when not in use rather than leaving it in standby mode"
            ),
            "potentialSavings": "3-10% energy savings",
            "difficultyLevel": "Easy",
            "additionalBenefits": "Reduces vampire power draw",
        },
        {
            "tip": f"Consider upgrading to a more energy-efficient {name} if yours is over 10 years old",
            "potentialSavings": "Up to 30% energy reduction with newer models",
            "difficultyLevel": "Hard",
            "additionalBenefits": "Access to newer features and improved performance",
        },
    ]


def get_device_tips(
    catalog: SQLAlchemySystemDeviceRepository,
    advisor: Optional[EnergyAdvisor],
    device_id: int,
) -> dict:
    device = catalog.get_by_id(device_id)
    if device is None:
        raise EntityNotFoundException("Device not found")

    result = {"device": SystemDeviceRead.model_validate(device).to_json()}
    if advisor is None:
        return {**result, "tips": fallback_device_tips(device), "source": SOURCE_FALLBACK}

    try:
        reply = advisor.device_tips(device.name, device.watts_options, device.device_work_all_day)
        tips = parse_tips(reply)
    except Exception as e:
        logger.warning("AI device tips failed, using fallback", device_id=device_id, error=str(e))
        return {**result, "tips": fallback_device_tips(device), "source": SOURCE_FALLBACK}

    return {**result, "tips": tips, "source": SOURCE_AI}
