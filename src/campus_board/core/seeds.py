"""
Sample records seeded into empty collections.

Each sample has a fixed identifier so seeding is idempotent. Timestamps are
offsets in days from the moment of seeding.
"""

from typing import Any, Dict, List

from campus_board.models import EntityKind
from campus_board.utils.clock import DAY_MS

# Older builds seeded these confessions; they are hidden from the board
LEGACY_CONFESSION_TITLES = frozenset({
    "Feeling Homesick",
    "Study Struggles",
    "Imposter Syndrome",
    "Social Anxiety",
    "Procrastination Problem",
    "Feeling Proud",
    "Missing Home Cooking",
    "Late Night Thoughts",
    "Grateful for Friends",
    "First Love",
})

# (days_ago, payload)
_CONFESSIONS = [
    (2, {
        "id": "demo_conf_1", "type": "confession", "title": "Lecture Hall Crush",
        "content": "There's this person who always sits two rows ahead of me in the 9 AM lecture. "
                   "I pretend to be interested in the slides but I'm really just hoping they'll look back once.",
        "category": "general", "priority": "low", "status": "pending", "upvotes": 23, "downvotes": 1,
    }),
    (1, {
        "id": "demo_conf_2", "type": "confession", "title": "Group Project Feelings",
        "content": "I volunteered for the documentation part of the group project just so I could sit "
                   "next to my crush during meetings.",
        "category": "academic", "priority": "low", "status": "pending", "upvotes": 18, "downvotes": 0,
    }),
    (3, {
        "id": "demo_conf_3", "type": "confession", "title": "Lab Partner Crush",
        "content": "My lab partner explains concepts so patiently that I pretend not to get things "
                   "just to keep them talking.",
        "category": "academic", "priority": "low", "status": "pending", "upvotes": 31, "downvotes": 2,
    }),
    (4, {
        "id": "demo_conf_4", "type": "confession", "title": "Library Encounter",
        "content": "We bumped into each other at the library doorway, dropped our books, laughed and "
                   "walked away. I have replayed those five seconds for days.",
        "category": "general", "priority": "low", "status": "pending", "upvotes": 27, "downvotes": 1,
    }),
    (5, {
        "id": "demo_conf_5", "type": "confession", "title": "Accidental Late-Night Text",
        "content": "I typed a whole paragraph about my crush to vent and sent it to them instead of my "
                   "friend. I put my phone on airplane mode and pretended I fell asleep.",
        "category": "general", "priority": "low", "status": "pending", "upvotes": 45, "downvotes": 3,
    }),
    (6, {
        "id": "demo_conf_6", "type": "confession", "title": "Secret Supporter",
        "content": "I've been leaving anonymous sticky-note compliments and snacks for a stressed-looking "
                   "classmate. I don't know if they know it's me.",
        "category": "general", "priority": "low", "status": "pending", "upvotes": 52, "downvotes": 0,
    }),
]

# Published by the "add samples" action; a longer set than the offline seeds
_PUBLISHED_CONFESSIONS = [
    ("Lecture Hall Crush", "general",
     "There's this person who always sits two rows ahead of me in the 9 AM lecture. I pretend to be "
     "interested in the slides but I'm really just hoping they'll look back and notice me once."),
    ("Group Project Feelings", "academic",
     "I volunteered for documentation in the group project just so I could sit next to my crush during meetings."),
    ("Lab Partner Crush", "academic",
     "My lab partner explains concepts so patiently that I pretend not to get things just to keep them talking."),
    ("Library Encounter", "general",
     "We bumped into each other at the library entrance, dropped our books, laughed and walked away. "
     "I've been thinking about those five seconds for days."),
    ("Accidental Late-Night Text", "general",
     "I accidentally sent my crush a paragraph about my feelings that was meant for my best friend, then put "
     "my phone on airplane mode and pretended I was asleep."),
    ("Secret Supporter", "general",
     "I've been leaving anonymous sticky-note compliments and snacks for a stressed-looking classmate. "
     "I don't know if they know it's me."),
    ("Campus Coffee Crush", "general",
     "I always time my coffee run to match my crush's usual order time. The barista knows my drink, "
     "but not that I'm only there to see one person."),
    ("Notes in the Margins", "academic",
     "I borrowed a friend's notebook and found a little heart next to my name in the margin. "
     "I've been overthinking it ever since."),
    ("Library Window Seat", "general",
     "Someone always takes the same window seat in the library. I schedule my study time just to sit "
     "across from them."),
    ("Crush in My DMs", "general",
     "My crush replied \"this made my day\" to a meme I sent and I've been smiling about it for a week straight."),
]

_FEEDBACK = [
    (3, {
        "id": "demo_fb_1", "type": "feedback", "title": "Great Library Facilities",
        "content": "The quiet study areas and the availability of resources have been really helpful "
                   "for my studies. Keep up the great work!",
        "category": "facilities", "priority": "low", "status": "resolved", "upvotes": 15, "downvotes": 0,
    }),
    (1, {
        "id": "demo_fb_2", "type": "complaint", "title": "Cafeteria Food Quality",
        "content": "Meals in the cafeteria are often cold and the variety has decreased. "
                   "Could you please look into this?",
        "category": "food", "priority": "high", "status": "pending", "upvotes": 42, "downvotes": 3,
    }),
    (5, {
        "id": "demo_fb_3", "type": "feedback", "title": "Event Organization Appreciation",
        "content": "The recent hackathon was amazing: great organization, good food and excellent prizes.",
        "category": "events", "priority": "low", "status": "resolved", "upvotes": 28, "downvotes": 1,
    }),
    (2, {
        "id": "demo_fb_4", "type": "complaint", "title": "WiFi Connectivity Issues",
        "content": "The WiFi in Building B keeps disconnecting during online classes and exams. "
                   "Please fix this urgently.",
        "category": "facilities", "priority": "high", "status": "reviewed", "upvotes": 67, "downvotes": 2,
    }),
    (7, {
        "id": "demo_fb_5", "type": "feedback", "title": "Professor Appreciation",
        "content": "Thank you to Professor Smith for being so understanding and helpful during office hours.",
        "category": "academic", "priority": "low", "status": "resolved", "upvotes": 19, "downvotes": 0,
    }),
    (4, {
        "id": "demo_fb_6", "type": "complaint", "title": "Parking Space Issues",
        "content": "There are never enough parking spaces during peak hours. "
                   "Could we have more spaces or a better system?",
        "category": "facilities", "priority": "medium", "status": "pending", "upvotes": 34, "downvotes": 5,
    }),
]

_LOST_FOUND = [
    (2, {
        "id": "demo_lf_1", "title": "Lost iPhone 14 Pro", "category": "electronics", "status": "lost",
        "description": "Black case with a distinctive sticker on the back. Last seen in the library around 3 PM.",
        "location": "Main Library, 2nd Floor", "contactInfo": "sarah.student@campus.edu",
        "reporterId": "user_sarah", "reporterName": "Sarah",
    }),
    (1, {
        "id": "demo_lf_2", "title": "Found Blue Backpack", "category": "accessories", "status": "found",
        "description": "Blue Nike backpack with notebooks, pens and a water bottle. Describe the contents to claim.",
        "location": "Cafeteria, Main Building", "contactInfo": "ahmed.found@campus.edu",
        "reporterId": "user_ahmed", "reporterName": "Ahmed",
    }),
    (3, {
        "id": "demo_lf_3", "title": "Lost Student ID Card", "category": "documents", "status": "lost",
        "description": "Name: John Smith, Batch: 22L-3456. Please return to the admin office.",
        "location": "Near Building A", "contactInfo": "john.smith@campus.edu",
        "reporterId": "user_john", "reporterName": "John",
    }),
    (5, {
        "id": "demo_lf_4", "title": "Found Laptop Charger", "category": "electronics", "status": "found",
        "description": "MacBook Pro charger left at the study hall front desk. Bring proof of ownership.",
        "location": "Study Hall, Building B", "contactInfo": "maria.helper@campus.edu",
        "reporterId": "user_maria", "reporterName": "Maria",
    }),
    (1, {
        "id": "demo_lf_5", "title": "Lost Black Wallet", "category": "accessories", "status": "lost",
        "description": "Black leather wallet with cash and cards, last seen in the gym locker room. Reward offered.",
        "location": "Gym, Sports Complex", "contactInfo": "david.lost@campus.edu",
        "reporterId": "user_david", "reporterName": "David",
    }),
    (4, {
        "id": "demo_lf_6", "title": "Found Textbooks - Calculus & Physics", "category": "books", "status": "found",
        "description": "Two textbooks with notes inside. Contact to identify.",
        "location": "Classroom 201, Building C", "contactInfo": "lisa.found@campus.edu",
        "reporterId": "user_lisa", "reporterName": "Lisa",
    }),
    (6, {
        "id": "demo_lf_7", "title": "Lost AirPods Pro (2nd Gen)", "category": "electronics", "status": "lost",
        "description": "White case, last connected near the library.",
        "location": "Library, Ground Floor", "contactInfo": "mike.lost@campus.edu",
        "reporterId": "user_mike", "reporterName": "Mike",
    }),
    (2, {
        "id": "demo_lf_8", "title": "Found Blue Hoodie", "category": "clothing", "status": "found",
        "description": "Blue hoodie with the university logo, size Medium. Describe to claim.",
        "location": "Cafeteria, Main Building", "contactInfo": "emma.found@campus.edu",
        "reporterId": "user_emma", "reporterName": "Emma",
    }),
]

# (days_ago, expires_in_days, payload)
_ANNOUNCEMENTS = [
    (2, 7, {
        "id": "demo_ann_1", "title": "Library Closure This Weekend",
        "content": "The main library will be closed this weekend for scheduled maintenance. "
                   "Study halls in Building B remain open 24/7.",
        "authorId": "admin", "authorName": "Campus Administration", "societyName": "Campus Administration",
        "priority": "high", "tags": ["library", "maintenance", "important"], "views": 245, "likes": 12,
    }),
    (5, 30, {
        "id": "demo_ann_2", "title": "Computer Science Society - Hackathon Registration Open",
        "content": "Join us for the annual campus hackathon in the Tech Building, Room 301. "
                   "Food and drinks provided.",
        "authorId": "society_head", "authorName": "CS Society", "societyName": "Computer Science Society",
        "priority": "medium", "tags": ["event", "hackathon", "competition"], "views": 189, "likes": 28,
    }),
    (1, 14, {
        "id": "demo_ann_3", "title": "Final Exam Schedule Released",
        "content": "Check the student portal for your exam dates and locations. "
                   "Bring your student ID and arrive 15 minutes early.",
        "authorId": "admin", "authorName": "Academic Affairs", "societyName": "Academic Affairs",
        "priority": "urgent", "tags": ["exams", "academic", "deadline"], "views": 567, "likes": 45,
    }),
    (3, 10, {
        "id": "demo_ann_4", "title": "New Coffee Shop Opening Near Campus",
        "content": "\"Campus Brew\" opens next week across from the main gate, with a 15% student discount.",
        "authorId": "admin", "authorName": "Campus Services",
        "priority": "low", "tags": ["food", "campus", "announcement"], "views": 123, "likes": 8,
    }),
    (7, 45, {
        "id": "demo_ann_5", "title": "Career Fair - January",
        "content": "Over 50 companies will attend the annual campus career fair. Prepare your resume!",
        "authorId": "admin", "authorName": "Career Services", "societyName": "Career Services",
        "priority": "high", "tags": ["career", "jobs", "opportunity"], "views": 342, "likes": 67,
    }),
    (4, 20, {
        "id": "demo_ann_6", "title": "Sports Club - Basketball Tournament",
        "content": "Teams of 5 players, trophy and medals for winners. Sign up at the sports center.",
        "authorId": "society_head", "authorName": "Sports Club", "societyName": "Sports Club",
        "priority": "medium", "tags": ["sports", "basketball", "tournament"], "views": 156, "likes": 23,
    }),
]

# Fields assigned by the server when a sample is published
_SERVER_FIELDS = ("id", "timestamp", "origin", "upvotes", "downvotes", "views", "likes")


def sample_records(kind: EntityKind, now: int) -> List[Dict[str, Any]]:
    """
    Build the sample payloads for ``kind`` relative to ``now``.

    Args:
        kind: Entity kind
        now: Reference time in epoch milliseconds

    Returns:
        camelCase record payloads tagged with a local origin
    """
    if kind is EntityKind.ANNOUNCEMENT:
        return [
            {**payload, "origin": "local", "timestamp": now - days_ago * DAY_MS,
             "expiresAt": now + expires_in * DAY_MS}
            for days_ago, expires_in, payload in _ANNOUNCEMENTS
        ]

    rows = {
        EntityKind.CONFESSION: _CONFESSIONS,
        EntityKind.FEEDBACK: _FEEDBACK,
        EntityKind.LOST_FOUND: _LOST_FOUND,
    }[kind]
    return [
        {**payload, "origin": "local", "timestamp": now - days_ago * DAY_MS}
        for days_ago, payload in rows
    ]


def publishable_samples(kind: EntityKind, now: int) -> List[Dict[str, Any]]:
    """Sample payloads stripped of the fields the server assigns."""
    if kind is EntityKind.CONFESSION:
        return [
            {"type": "confession", "title": title, "content": content, "category": category, "priority": "low"}
            for title, category, content in _PUBLISHED_CONFESSIONS
        ]

    return [
        {key: value for key, value in sample.items() if key not in _SERVER_FIELDS}
        for sample in sample_records(kind, now)
    ]
