from enum import Enum


class TableNames(str, Enum):
    WEDDING_EVENTS = "wedding_events"
    GUESTS = "guests"
    CEREMONIES = "ceremonies"
    GUEST_CEREMONIES = "guest_ceremonies"
    MEAL_OPTIONS = "meal_options"
    GUEST_MEAL_SELECTIONS = "guest_meal_selections"
    TRAVEL_INFO = "travel_info"
    COUPLE_MESSAGES = "couple_messages"
    ACCOMMODATIONS = "accommodations"
    ROOM_ALLOCATIONS = "room_allocations"
    EMAIL_LOGS = "email_logs"
    NOTIFICATION_LOGS = "notification_logs"
