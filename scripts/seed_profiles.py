"""Seed a handful of demo seeker and supporter profiles for local development."""
import asyncio
import sys
sys.path.insert(0, ".")

from app.database import session_scope
from app.models.profile import Role
from app.schemas.profile import ProfileUpsert
from app.services.profile_service import ProfileService
from app.store.profiles import ProfileStore


DEMO_PROFILES = [
    {
        "user_id": "demo-seeker-1",
        "role": Role.SEEKER,
        "first_name": "Maya",
        "bio": "Recently diagnosed, looking for someone who has been through chemo.",
        "primary_category": "Breast Cancer",
        "secondary_category": "Chemotherapy",
        "support_tags": ["Emotional support", "Treatment tips"],
        "interest_tags": ["hiking", "Reading"],
        "age_bracket": "30-39",
        "stage_descriptor": "Stage 2",
        "recurrence": "First diagnosis",
        "building": "North Tower",
        "floor": "4",
    },
    {
        "user_id": "demo-seeker-2",
        "role": Role.SEEKER,
        "first_name": "Tom",
        "bio": "Navigating radiation and would love to talk to someone further along.",
        "primary_category": "Lymphoma",
        "secondary_category": "Radiation",
        "support_tags": ["Side-effect advice"],
        "interest_tags": ["Football", "cooking"],
        "age_bracket": "40-49",
        "stage_descriptor": "Stage 3",
        "recurrence": "Recurrence",
    },
    {
        "user_id": "demo-supporter-1",
        "role": Role.SUPPORTER,
        "first_name": "Priya",
        "bio": "Five years out and happy to share what helped me.",
        "primary_category": "Breast Cancer",
        "secondary_category": "Chemotherapy",
        "support_tags": ["Emotional support", "Treatment tips", "Nutrition"],
        "interest_tags": ["Hiking & camping", "art"],
        "age_bracket": "30-39",
        "stage_descriptor": "5 years cancer-free",
        "recurrence": "First diagnosis",
        "profile_complete": True,
    },
    {
        "user_id": "demo-supporter-2",
        "role": Role.SUPPORTER,
        "first_name": "Jordan",
        "bio": "Went through radiation twice; ask me anything.",
        "primary_category": "Lymphoma",
        "secondary_category": "Radiation",
        "support_tags": ["Side-effect advice", "Emotional support"],
        "interest_tags": ["Cooking"],
        "age_bracket": "40-49",
        "stage_descriptor": "Survivor",
        "recurrence": "Recurrence",
        "profile_complete": True,
    },
    {
        "user_id": "demo-supporter-3",
        "role": Role.SUPPORTER,
        "first_name": "Alex",
        "bio": "Currently on a break from volunteering.",
        "primary_category": "Breast Cancer",
        "secondary_category": "Surgery",
        "support_tags": ["Emotional support"],
        "age_bracket": "50-59",
        "stage_descriptor": "Stage 2",
        "recurrence": "First diagnosis",
        "available": False,
    },
]


async def seed():
    async with session_scope() as session:
        service = ProfileService(ProfileStore(session))
        for entry in DEMO_PROFILES:
            data = dict(entry)
            user_id = data.pop("user_id")
            profile = await service.save_profile(user_id, ProfileUpsert(**data))
            print(f"  Seeded {profile.role} {user_id} (stage: {profile.stage_kind})")
    print("Done seeding profiles.")


if __name__ == "__main__":
    asyncio.run(seed())
