"""
Planning advisor: asks an LLM for ways to place the remaining vacation days
around the configured holidays ("bridge days").
"""
import logging
import threading
from datetime import datetime
from typing import Dict, Iterable, Optional

from openai import OpenAI
from pydantic import ValidationError

import config
from models import ANNUAL_QUOTA, LeaveEntry, LeaveType, PlanningAdvice, PublicHoliday


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
  "You are a professional HR and life coach helping one person plan their time off. "
  "Answer with a single JSON object and nothing else."
)


class AdvisorBusyError(Exception):
  """Raised when advice is requested while a previous request is still running."""


class PlanningAdvisor:
  """Service for asking the LLM for leave-planning suggestions"""

  def __init__(self, client: Optional[OpenAI], model: str = config.AI_MODEL, temperature: float = config.AI_TEMPERATURE):
    self.client = client
    self.model = model
    self.temperature = temperature
    self._in_flight = threading.Lock()

  @property
  def enabled(self) -> bool:
    return self.client is not None

  @property
  def in_flight(self) -> bool:
    return self._in_flight.locked()

  def build_prompt(
      self,
      entries: Iterable[LeaveEntry],
      remaining_quota: Dict[LeaveType, int],
      holidays: Iterable[PublicHoliday],
      year: int = None):
    # Note: LLMs have trouble figuring out the current date. Help them.
    if year is None:
      year = datetime.now().year

    holiday_lines = "\n".join(f"- {h.name}: {h.date}" for h in holidays) or "- none"
    entry_lines = "\n".join(
        f"- {e.type.value}: {e.start_date} to {e.end_date} ({e.description})" for e in entries
    ) or "- none"

    return f"""
    I have a leave tracking app. Current year is {year}.
    My total annual quota is: Vacation: {ANNUAL_QUOTA[LeaveType.VACATION]}, Sick: {ANNUAL_QUOTA[LeaveType.SICK]}.
    My remaining balance is: Vacation: {remaining_quota[LeaveType.VACATION]}, Sick: {remaining_quota[LeaveType.SICK]}.

    The following public holidays are configured in my system:
{holiday_lines}

    Current booked leaves:
{entry_lines}

    Suggest 3 creative ways to use my remaining VACATION days effectively.
    Crucially, look at the configured public holidays and suggest "bridge days" to maximize my time off
    (e.g., if a holiday is on a Thursday, suggest taking the Friday off for a 4-day weekend).
    Provide specific dates based on the configured holidays.
    Also provide a brief motivational summary of my current balance.

    Respond with JSON of this shape:
    {{"summary": "string", "suggestions": [{{"title": "string", "description": "string", "dates": "string", "benefit": "string"}}]}}
    """

  def get_smart_leave_planning(
      self,
      entries: Iterable[LeaveEntry],
      remaining_quota: Dict[LeaveType, int],
      holidays: Iterable[PublicHoliday]) -> Optional[PlanningAdvice]:
    """
    Ask for planning advice.

    Returns:
        The parsed advice, or None when the advisor is disabled or anything goes wrong

    Raises:
        AdvisorBusyError: If another request is still in flight
    """
    if not self.enabled:
      logger.info("Planning advisor disabled (no API key configured)")
      return None

    if not self._in_flight.acquire(blocking=False):
      raise AdvisorBusyError("A planning request is already in progress")

    try:
      messages = [
          {"role": "system", "content": SYSTEM_PROMPT},
          {"role": "user", "content": self.build_prompt(entries, remaining_quota, holidays)},
      ]
      response = self.client.chat.completions.create(
          model=self.model,
          messages=messages,
          temperature=self.temperature,
          response_format={"type": "json_object"},
      )
      content = response.choices[0].message.content
      logger.debug("Planning advisor raw response: %s", content)
      return PlanningAdvice.model_validate_json(strip_code_fence(content))
    except ValidationError:
      logger.exception("Planning advisor returned malformed advice")
      return None
    except Exception:
      logger.exception("Error fetching planning advice")
      return None
    finally:
      self._in_flight.release()


def strip_code_fence(text: str) -> str:
  """Pull the JSON body out of a ```json fenced block if the model added one"""
  if text is None:
    return ""
  if "```json" in text:
    return text.split("```json")[1].split("```")[0].strip()
  if "```" in text:
    return text.split("```")[1].split("```")[0].strip()
  return text.strip()


def create_planning_advisor_from_env() -> PlanningAdvisor:
  """Build the advisor from configuration; without an API key it is returned disabled"""
  if not config.AI_API_KEY:
    logger.warning(
        "Planning advisor disabled. Set GEMINI_API_KEY (or API_KEY / OPENAI_API_KEY) to enable it."
    )
    return PlanningAdvisor(client=None)

  try:
    client = OpenAI(api_key=config.AI_API_KEY, base_url=config.AI_BASE_URL)
  except Exception:
    logger.warning("Failed to initialize planning advisor client", exc_info=True)
    return PlanningAdvisor(client=None)

  logger.info("Planning advisor enabled (model=%s)", config.AI_MODEL)
  return PlanningAdvisor(client=client)
