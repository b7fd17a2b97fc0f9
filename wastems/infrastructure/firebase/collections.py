"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Use these constants so collection names
stay consistent; the required-field table lives in
wastems.infrastructure.services.schema_bootstrap.
"""

COLLECTION_USERS = "users"

# People
COLLECTION_CITIZENS = "citizens"
COLLECTION_WASTE_WORKERS = "waste_workers"
COLLECTION_GREEN_CHAMPIONS = "green_champions"

# Waste sources
COLLECTION_HOUSEHOLDS = "households"
COLLECTION_BULK_GENERATORS = "bulk_generators"

# Infrastructure
COLLECTION_WASTE_FACILITIES = "waste_facilities"
COLLECTION_COLLECTION_VEHICLES = "collection_vehicles"

# Activity records
COLLECTION_TRAINING_ENROLLMENTS = "training_enrollments"
COLLECTION_TRAINING_SESSIONS = "training_sessions"
COLLECTION_SEGREGATION_VIOLATIONS = "segregation_violations"
COLLECTION_MONITORING_REPORTS = "monitoring_reports"
COLLECTION_CLEANING_EVENTS = "cleaning_events"
COLLECTION_KIT_ORDERS = "kit_orders"
COLLECTION_KIT_REQUESTS = "kit_requests"
COLLECTION_SAFETY_GEAR_REQUESTS = "safety_gear_requests"
COLLECTION_INCENTIVE_REWARDS = "incentive_rewards"
COLLECTION_POINT_REDEMPTIONS = "point_redemptions"
COLLECTION_PENALTIES = "penalties"

# Governance and reference data
COLLECTION_ULBS = "ulbs"
COLLECTION_WASTE_GUIDELINES = "waste_guidelines"
COLLECTION_AVAILABLE_REWARDS = "available_rewards"
