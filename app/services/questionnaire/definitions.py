"""
Built-in questionnaire catalog.

Each category lists its questions in display order. ``categoryId`` and
``categoryName`` are filled in from the owning category when the catalog
loads, so they are omitted here.
"""

from typing import Any, Final

RATING_SCALE: Final[list[str]] = ["1", "2", "3", "4", "5", "6", "7"]

BACKGROUND: Final[str] = "background"
INTERESTS: Final[str] = "interests"
MOVIES_AND_SHOWS: Final[str] = "movies_and_shows"
PERSPECTIVES: Final[str] = "perspectives"
SELF: Final[str] = "self"
SUBSTANCES: Final[str] = "substances"


def _rating(question_id: str, title: str, description: str) -> dict[str, Any]:
    return {
        "id": question_id,
        "title": title,
        "description": description,
        "type": "RATING",
        "options": RATING_SCALE,
    }


DEFAULT_CATALOG: Final[list[dict[str, Any]]] = [
    {
        "id": BACKGROUND,
        "name": "Background",
        "description": "Your background and upbringing",
        # Background counts the most towards overall completion
        "weight": 4.0,
        "imageUrl": "https://images.unsplash.com/photo-1511895426328-dc8714191300?w=800&q=80",
        "questions": [
            {
                "id": "fluent_languages",
                "title": "Fluent languages",
                "description": "What languages do you speak fluently?",
                "type": "MULTIPLE_CHOICE",
                "options": ["Hindi", "Telugu", "English", "Kannada", "Tamil", "Malayalam"],
            },
            {
                "id": "sibling_order",
                "title": "Sibling order",
                "description": "I am a ___ child",
                "type": "SINGLE_CHOICE",
                "options": ["Younger", "Middle", "Older", "Only"],
            },
            {
                "id": "home_town",
                "title": "Home town",
                "description": "What is your home town?",
                "type": "TEXT",
            },
            {
                "id": "financial_status",
                "title": "Financial status",
                "description": "What financial status did you grow up in?",
                "type": "SINGLE_CHOICE",
                "options": ["Working class", "Middle class", "Upper class", "Ultra wealthy"],
            },
            {
                "id": "interesting_fact",
                "title": "Interesting fact",
                "description": "What is the fun or interesting fact about you that you want to share with your group?",
                "type": "TEXT",
            },
        ],
    },
    {
        "id": INTERESTS,
        "name": "Interests",
        "description": "Your interests and preferences",
        "weight": 1.0,
        "imageUrl": "https://images.unsplash.com/photo-1529156069898-49953e39b3ac?w=800&q=80",
        "questions": [
            {
                "id": "hobbies",
                "title": "Hobbies",
                "description": "What are your hobbies or activities you enjoy?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "Reading", "Travel", "Music", "Sports", "Cooking", "Photography",
                    "Gardening", "Gaming", "Movies", "Art", "Dancing", "Trekking",
                    "Yoga", "Meditation", "Cycling", "Writing", "Volunteering", "Pets",
                    "Technology", "Fashion", "Fitness", "Running", "Swimming", "Painting",
                    "Podcasts", "Blogging", "Chess", "Board games", "Camping", "Fishing",
                ],  # fmt: skip
            },
            {
                "id": "my_interest",
                "title": "My interest",
                "description": "What are your main interests?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "Fashion", "Online communities", "Teaching", "Online dating",
                    "Entrepreneurship", "Creative arts", "Social causes", "Fitness & wellness",
                    "Technology", "Travel & exploration", "Food & culinary", "Music & performing arts",
                ],  # fmt: skip
            },
            _rating("nature_rating", "Time with nature", "I enjoy spending time with nature"),
            {
                "id": "enjoy_with_friends",
                "title": "Time with friends",
                "description": "I enjoy ___ with friends",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "Party", "Dinner", "Sports", "Movies", "Travel", "Gaming",
                    "Coffee chats", "Concerts", "Hiking", "Shopping", "Cooking together", "Road trips",
                ],  # fmt: skip
            },
            {
                "id": "sports_watch",
                "title": "Sports I watch",
                "description": "What sport do you watch?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "Cricket", "Football", "Tennis", "Basketball", "Badminton",
                    "Formula 1", "Wrestling", "Kabaddi", "Hockey", "Volleyball", "Athletics",
                ],  # fmt: skip
            },
        ],
    },
    {
        "id": MOVIES_AND_SHOWS,
        "name": "Movies and Shows",
        "description": "Your favourite movies and shows",
        "weight": 1.0,
        "imageUrl": "https://images.unsplash.com/photo-1489599849927-2ee91cede3ba?w=800&q=80",
        "questions": [
            {
                "id": "favourite_movies",
                "title": "Favourite movies",
                "description": "What are your favourite movies?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "3 Idiots", "Dangal", "Lagaan", "Sholay", "Dilwale Dulhania Le Jayenge",
                    "Taare Zameen Par", "PK", "Bajrangi Bhaijaan", "Bahubali", "KGF",
                    "Inception", "The Dark Knight", "Interstellar", "Forrest Gump",
                    "The Shawshank Redemption", "Pulp Fiction", "Fight Club", "The Godfather",
                    "Titanic", "Avatar",
                ],  # fmt: skip
            },
            {
                "id": "favourite_shows",
                "title": "Favourite shows",
                "description": "What are your favourite TV shows or web series?",
                "type": "MULTIPLE_CHOICE",
                "options": [
                    "Sacred Games", "Delhi Crime", "Family Man", "Scam 1992", "Aspirants",
                    "Panchayat", "Kota Factory", "Gullak", "TVF Pitchers", "Permanent Roommates",
                    "Breaking Bad", "Game of Thrones", "Stranger Things", "Friends", "The Office",
                    "Sherlock", "Money Heist", "Squid Game", "Wednesday", "The Crown",
                ],  # fmt: skip
            },
        ],
    },
    {
        "id": PERSPECTIVES,
        "name": "Perspectives",
        "description": "Your perspectives and beliefs",
        "weight": 1.0,
        "imageUrl": "https://images.unsplash.com/photo-1522071820081-009f0129c71c?w=800&q=80",
        "questions": [
            _rating("innate_purpose", "Innate purpose", "I believe humans are born with an innate purpose"),
            {
                "id": "astrology_view",
                "title": "View on astrology",
                "description": "What do you think about astrology?",
                "type": "SINGLE_CHOICE",
                "options": [
                    "I don't believe in it",
                    "It's fake",
                    "Fun to talk about",
                    "I find it interesting",
                    "I believe in it",
                ],
            },
            _rating(
                "comedy_politically_correct",
                "Comedy and political correctness",
                "I believe comedy is becoming too politically correct",
            ),
            {
                "id": "meet_other_political_side",
                "title": "Meeting different political views",
                "description": "Do you like meeting people of the other side of the political spectrum?",
                "type": "SINGLE_CHOICE",
                "options": [
                    "I prefer not to",
                    "I am different from them",
                    "I like to meet them",
                    "I enjoy hearing different views",
                    "It doesn't matter to me",
                ],
            },
        ],
    },
    {
        "id": SELF,
        "name": "Self",
        "description": "About yourself",
        "weight": 1.0,
        "imageUrl": "https://images.unsplash.com/photo-1506794778202-cad84cf45f1d?w=800&q=80",
        "questions": [
            {
                "id": "relationship_status",
                "title": "Relationship status",
                "description": "What is your relationship status?",
                "type": "SINGLE_CHOICE",
                "options": ["Single", "Committed", "Married"],
            },
            _rating("self_attractiveness", "Self-perceived attractiveness", "How attractive do you consider yourself?"),
            _rating("self_intelligence", "Self-perceived intelligence", "How intelligent do you consider yourself?"),
            _rating("maths_smart", "Maths smart", "Do you consider yourself maths smart?"),
            {
                "id": "street_smart",
                "title": "Street smart",
                "description": "Do you consider yourself street smart?",
                "type": "SINGLE_CHOICE",
                "options": ["I can be a bit naive", "I can handle anything", "Smart enough to avoid a ripoff"],
            },
            {
                "id": "religious_affiliation",
                "title": "Religious affiliation",
                "description": "What religious affiliation do you identify with?",
                "type": "SINGLE_CHOICE",
                "options": [
                    "Hindu", "Muslim", "Christian", "Sikh", "Buddhist", "Jain",
                    "Jewish", "Atheist", "Agnostic", "Spiritual but not religious",
                    "Prefer not to say", "Other",
                ],  # fmt: skip
            },
            {
                "id": "instagram_id",
                "title": "Instagram ID",
                "description": "What is your Instagram ID?",
                "type": "TEXT",
            },
        ],
    },
    {
        "id": SUBSTANCES,
        "name": "Substances",
        "description": "Substance use and preferences",
        "weight": 1.0,
        "imageUrl": "https://images.unsplash.com/photo-1514933651103-005c3ef206bb?w=800&q=80",
        "questions": [
            _rating("vaping_with_friends", "Vaping with friends", "I enjoy vaping with friends"),
            _rating("smoking_with_friends", "Smoking with friends", "I enjoy smoking with friends"),
            _rating("psychedelics", "Using psychedelics", "I enjoy using psychedelics"),
            _rating("drinking_with_friends", "Drinking with friends", "I enjoy drinking with friends"),
            _rating("cocaine_with_friends", "Cocaine with friends", "I enjoy using cocaine with friends"),
        ],
    },
]
