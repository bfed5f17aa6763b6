"""Event type constants"""


class EventTypes:
    """Event type string constants"""

    # equipment
    EQUIPMENT_GENERATED = "equipment_generated"
    EQUIPMENT_ENHANCED = "equipment_enhanced"
    EQUIPMENT_DESTROYED = "equipment_destroyed"

    # adventurer
    ADVENTURER_EQUIPPED = "adventurer_equipped"
    ADVENTURER_LEVELED_UP = "adventurer_leveled_up"

    # party roster
    PARTY_CREATED = "party_created"
    PARTY_DISBANDED = "party_disbanded"
    PARTY_MEMBER_ADDED = "party_member_added"
    PARTY_MEMBER_REMOVED = "party_member_removed"
    PARTY_LEADER_CHANGED = "party_leader_changed"
    PARTY_FORMATION_CHANGED = "party_formation_changed"
    PARTY_MISSION_RESOLVED = "party_mission_resolved"

    # === scheduler call-ins (emitted by the turn/day scheduler) ===
    MISSION_COMPLETED = "mission_completed"
    NEW_DAY = "new_day"
