"""Domain enumerations and role / lifecycle rules."""

import enum


class BatchStatus(str, enum.Enum):
    HARVESTED = "harvested"
    PROCESSING = "processing"
    TESTED = "tested"
    MANUFACTURED = "manufactured"
    PACKAGED = "packaged"
    DISTRIBUTED = "distributed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


# Lifecycle order: a batch only ever moves forward along this list
_STATUS_ORDER: list[BatchStatus] = list(BatchStatus)


class EventKind(str, enum.Enum):
    COLLECTION = "collection"
    PROCESSING = "processing"
    QUALITY_TEST = "quality_test"
    TRANSFER = "transfer"


class ProcessingStepType(str, enum.Enum):
    DRYING = "drying"
    GRINDING = "grinding"
    STORAGE = "storage"
    PACKAGING = "packaging"


class QualityTestType(str, enum.Enum):
    MOISTURE = "moisture"
    PESTICIDE = "pesticide"
    DNA = "dna"
    HEAVY_METALS = "heavy_metals"
    MICROBIAL = "microbial"


class EntityType(str, enum.Enum):
    FARMER = "farmer"
    PROCESSOR = "processor"
    LAB = "lab"
    MANUFACTURER = "manufacturer"
    RETAILER = "retailer"


class UserRole(str, enum.Enum):
    FARMER = "farmer"
    PROCESSOR = "processor"
    LAB = "lab"
    MANUFACTURER = "manufacturer"
    REGULATOR = "regulator"
    CONSUMER = "consumer"


# Maps role -> event kinds that role may record
ROLE_EVENT_KINDS: dict[UserRole, set[EventKind]] = {
    UserRole.FARMER: {EventKind.COLLECTION},
    UserRole.PROCESSOR: {EventKind.PROCESSING},
    UserRole.LAB: {EventKind.QUALITY_TEST},
    UserRole.MANUFACTURER: {EventKind.TRANSFER},
    UserRole.REGULATOR: set(),
    UserRole.CONSUMER: set(),
}
