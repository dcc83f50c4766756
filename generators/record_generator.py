"""
Score Record Generator

Generates realistic lead, property and agent score records for demos and
tests. Every record carries a factor breakdown synthesized to reproduce its
composite score, so the breakdown always explains the number shown.

Supports deterministic generation: a seeded generator replays the same
records for the same reference time.
"""

import random
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from core.config import settings
from core.exceptions import InvalidRangeError
from core.logging import get_logger
from core.utils import clamp
from d5_scoring.factors import FactorSynthesizer, load_factor_vocabulary
from d5_scoring.tiers import performance_label
from d5_scoring.types import (
    AgentPeriod,
    EntityType,
    FactorBreakdown,
    LeadSource,
    LeadStatus,
    PropertyStatus,
    PropertyType,
)

logger = get_logger(__name__, domain="generators")


@dataclass
class UserRef:
    """A user who owns, created or is assigned to a record"""

    id: str
    first_name: str
    last_name: str
    email: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class LeadDetails:
    name: str
    email: str
    phone: str
    budget: Dict[str, int]
    interested_in: List[str]
    source: LeadSource
    status: LeadStatus
    assigned_to: UserRef


@dataclass
class PropertyDetails:
    name: str
    location: Dict[str, str]
    type: PropertyType
    price: int
    size: int
    amenities: List[str]
    status: PropertyStatus


@dataclass
class AgentDetails:
    user: UserRef
    performance: Dict[str, int]
    period: AgentPeriod = AgentPeriod.MONTHLY


EntityDetails = Union[LeadDetails, PropertyDetails, AgentDetails]


def _plain(value: Any) -> Any:
    """Replace enum members with their values, recursively"""
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass
class ScoreRecord:
    """A scored entity with the factor breakdown behind its score"""

    id: str
    entity_type: EntityType
    score: float
    factors: FactorBreakdown
    details: EntityDetails
    created_by: UserRef
    created_at: datetime
    updated_at: datetime
    notes: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "entity_type": self.entity_type.value,
            "score": self.score,
            "notes": self.notes,
            "factors": self.factors.to_dict(),
            "details": _plain(asdict(self.details)),
            "created_by": asdict(self.created_by),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "metadata": self.metadata,
        }


class RecordGenerator:
    """
    Generates score records with synthesized factor breakdowns.

    Features:
    - Realistic Hyderabad-market names, locations, prices and contacts
    - Weighted lead and property status distributions
    - Agent performance figures correlated with the agent's score
    - Deterministic generation for reproducible tests
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        synthesizer: Optional[FactorSynthesizer] = None,
        reference_time: Optional[datetime] = None,
    ):
        """
        Args:
            seed: Seed for a private random source when rng is not given
            rng: Random source shared with the factor synthesizers
            synthesizer: Synthesizer to use for every entity type; by default
                each entity type gets one over its own factor vocabulary
            reference_time: "Now" for created_at / updated_at (current time if None)
        """
        self.seed = seed if seed is not None else settings.random_seed
        self.random = rng or random.Random(self.seed)
        self.reference_time = reference_time or datetime.now(UTC)
        self.factors_per_record = settings.factors_per_record
        self.score_range = (settings.record_score_min, settings.record_score_max)
        self.history_days = settings.record_history_days

        self._synthesizer = synthesizer
        self._synthesizers: Dict[EntityType, FactorSynthesizer] = {}
        self._setup_vocabularies()

    def _setup_vocabularies(self):
        """Setup the sample data records are drawn from"""
        self.first_names = ["Raj", "Priya", "Ajay", "Neha", "Vikram", "Ananya", "Sanjay", "Pooja", "Rahul", "Divya"]
        self.last_names = ["Sharma", "Patel", "Kumar", "Singh", "Reddy", "Joshi", "Gupta", "Mehta", "Verma", "Rao"]
        self.email_domains = ["gmail.com", "yahoo.com", "outlook.com", "hotmail.com", "company.com"]
        self.city = "Hyderabad"
        self.areas = [
            "Banjara Hills", "Jubilee Hills", "Gachibowli", "Madhapur", "Kukatpally",
            "HITEC City", "Kondapur", "Miyapur", "Manikonda", "Narsingi",
        ]
        self.name_prefixes = ["Royal", "Green", "Metro", "Urban", "Prime", "Luxury", "Elite", "Golden", "Silver", "Diamond"]
        self.name_suffixes = [
            "Residency", "Heights", "Towers", "Arcade", "Plaza",
            "Gardens", "Enclave", "Paradise", "Estate", "Court",
        ]
        self.amenities = {
            PropertyType.RESIDENTIAL: [
                "Parking", "Swimming Pool", "Gym", "Security", "Power Backup", "Club House", "Garden", "Play Area",
            ],
            PropertyType.COMMERCIAL: [
                "Parking", "Security", "Power Backup", "Conference Room", "Cafeteria", "HVAC", "High-speed Internet",
            ],
            PropertyType.LAND: ["Road Access", "Water Connection", "Electricity", "Boundary Wall", "HMDA Approved"],
        }
        # Price in rupees, size in sq ft: (low, high) inclusive
        self.price_ranges = {
            PropertyType.RESIDENTIAL: (3_000_000, 8_000_000),
            PropertyType.COMMERCIAL: (5_000_000, 15_000_000),
            PropertyType.LAND: (2_000_000, 10_000_000),
        }
        self.size_ranges = {
            PropertyType.RESIDENTIAL: (1000, 2000),
            PropertyType.COMMERCIAL: (2000, 5000),
            PropertyType.LAND: (3000, 8000),
        }
        self.budget_range = (2_000_000, 8_000_000)
        self.lead_status_weights = {
            LeadStatus.NEW: 3,
            LeadStatus.CONTACTED: 4,
            LeadStatus.QUALIFIED: 3,
            LeadStatus.NEGOTIATION: 2,
            LeadStatus.CLOSED: 1,
            LeadStatus.LOST: 2,
        }
        self.property_status_weights = {
            PropertyStatus.AVAILABLE: 5,
            PropertyStatus.PENDING: 2,
            PropertyStatus.SOLD: 3,
        }

    def synthesizer_for(self, entity_type: EntityType) -> FactorSynthesizer:
        """Factor synthesizer for an entity type, sharing this generator's random source"""
        if self._synthesizer is not None:
            return self._synthesizer
        if entity_type not in self._synthesizers:
            self._synthesizers[entity_type] = FactorSynthesizer(
                vocabulary=load_factor_vocabulary(entity_type), rng=self.random
            )
        return self._synthesizers[entity_type]

    def _weighted_choice(self, weights: Dict[Any, int]) -> Any:
        return self.random.choices(list(weights.keys()), weights=list(weights.values()))[0]

    def _new_id(self) -> str:
        return str(uuid.UUID(int=self.random.getrandbits(128), version=4))

    def generate_user(self) -> UserRef:
        """Generate a user with a matching email address"""
        first_name = self.random.choice(self.first_names)
        last_name = self.random.choice(self.last_names)
        domain = self.random.choice(self.email_domains)
        return UserRef(
            id=self._new_id(),
            first_name=first_name,
            last_name=last_name,
            email=f"{first_name.lower()}.{last_name.lower()}@{domain}",
        )

    def generate_phone(self) -> str:
        return f"+91 {self.random.randint(1, 9)}{self.random.randint(0, 999_999_999):09d}"

    def generate_created_at(self) -> datetime:
        """A timestamp up to the configured history window before the reference time"""
        days_back = self.random.randint(0, max(self.history_days - 1, 0))
        return self.reference_time - timedelta(days=days_back)

    def generate_budget(self) -> Dict[str, int]:
        """Budget with min <= max inside the configured range"""
        low, high = self.budget_range
        budget_min = self.random.randint(low, low + (high - low) // 4)
        budget_max = self.random.randint(budget_min, high)
        return {"min": budget_min, "max": budget_max}

    def generate_property_name(self, area: str, property_type: PropertyType) -> str:
        prefix = self.random.choice(self.name_prefixes)
        suffix = self.random.choice(self.name_suffixes)
        if property_type == PropertyType.RESIDENTIAL:
            return f"{prefix} {suffix}"
        if property_type == PropertyType.COMMERCIAL:
            return f"{area} Business {suffix}"
        return f"{area} {prefix} Plot"

    def generate_amenities(self, property_type: PropertyType) -> List[str]:
        """2 to 5 distinct amenities typical for the property type"""
        options = self.amenities[property_type]
        count = min(self.random.randint(2, 5), len(options))
        return self.random.sample(options, count)

    def generate_agent_performance(self, score: float) -> Dict[str, int]:
        """Performance figures loosely correlated with the agent's score"""
        base = score * 0.8
        variability = 20

        def correlated() -> int:
            return int(clamp(self.random.uniform(0, variability) + base - variability / 2, 0, 100))

        return {
            "leads_handled": self.random.randint(10, 59),
            "conversion_rate": correlated(),
            "revenue_generated": self.random.randint(1_000_000, 10_999_999),
            "customer_satisfaction": correlated(),
            "response_time": self.random.randint(1, 24),
        }

    def generate_lead_details(self) -> LeadDetails:
        user = self.generate_user()
        property_type = self.random.choice(list(PropertyType))
        return LeadDetails(
            name=user.full_name,
            email=user.email,
            phone=self.generate_phone(),
            budget=self.generate_budget(),
            interested_in=[f"{self.random.choice(self.areas)} {property_type.value}"],
            source=self.random.choice(list(LeadSource)),
            status=self._weighted_choice(self.lead_status_weights),
            assigned_to=self.generate_user(),
        )

    def generate_property_details(self) -> PropertyDetails:
        property_type = self.random.choice(list(PropertyType))
        area = self.random.choice(self.areas)
        return PropertyDetails(
            name=self.generate_property_name(area, property_type),
            location={"area": area, "city": self.city},
            type=property_type,
            price=self.random.randint(*self.price_ranges[property_type]),
            size=self.random.randint(*self.size_ranges[property_type]),
            amenities=self.generate_amenities(property_type),
            status=self._weighted_choice(self.property_status_weights),
        )

    def generate_agent_details(self, score: float) -> AgentDetails:
        return AgentDetails(
            user=self.generate_user(),
            performance=self.generate_agent_performance(score),
        )

    def _notes(self, entity_type: EntityType, details: EntityDetails, score: float) -> str:
        if entity_type == EntityType.LEAD:
            state = "no longer active" if details.status == LeadStatus.LOST else "actively being pursued"
            follow_up = " Follow up required." if self.random.random() > 0.7 else ""
            return f"This lead is {state}.{follow_up}"
        if entity_type == EntityType.PROPERTY:
            opportunity = " Good investment opportunity." if self.random.random() > 0.7 else ""
            return (
                f"This {details.type.value} property in {details.location['area']} "
                f"is {details.status.value}.{opportunity}"
            )
        return f"{details.user.first_name} is performing {performance_label(score)}."

    def generate_record(self, entity_type: Union[EntityType, str]) -> ScoreRecord:
        """Generate one record whose factor breakdown reproduces its score"""
        entity = EntityType.parse(entity_type)
        score = self.random.randint(*self.score_range)

        if entity == EntityType.LEAD:
            details = self.generate_lead_details()
        elif entity == EntityType.PROPERTY:
            details = self.generate_property_details()
        else:
            details = self.generate_agent_details(score)

        breakdown = self.synthesizer_for(entity).synthesize(self.factors_per_record, score)

        return ScoreRecord(
            id=self._new_id(),
            entity_type=entity,
            score=float(score),
            factors=breakdown,
            details=details,
            notes=self._notes(entity, details, score),
            created_by=self.generate_user(),
            created_at=self.generate_created_at(),
            updated_at=self.reference_time,
            metadata={"generation_seed": self.seed},
        )

    def generate(self, entity_type: Union[EntityType, str], count: int) -> List[ScoreRecord]:
        """Generate `count` records of one entity type"""
        entity = EntityType.parse(entity_type)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidRangeError("count", count, 0)

        records = [self.generate_record(entity) for _ in range(count)]
        logger.debug(f"Generated {count} {entity.value} records")
        return records

    def generate_all(self, count: int = 10) -> List[ScoreRecord]:
        """Generate `count` leads, then `count` properties, then `count` agents"""
        records = []
        for entity in (EntityType.LEAD, EntityType.PROPERTY, EntityType.AGENT):
            records.extend(self.generate(entity, count))

        logger.info(f"Generated {len(records)} score records", extra={"per_type": count})
        return records

    def generate_top(self, entity_type: Union[EntityType, str], limit: int = 5) -> List[ScoreRecord]:
        """Generate `limit` records of one type, highest score first"""
        records = self.generate(entity_type, limit)
        return sorted(records, key=lambda record: record.score, reverse=True)
