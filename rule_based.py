from pydantic_models import Severity, SymptomAdvice

EMERGENCY_KEYWORDS = ["chest pain", "can't breathe", "unconscious", "severe bleeding"]
META_QUESTION_PHRASES = ["what should i do", "how do i", "can you help"]
HEADACHE_KEYWORDS = ["headache", "head hurts"]
STOMACH_KEYWORDS = ["stomach", "tummy", "nausea"]

IMAGE_ADVICE = SymptomAdvice(
    severity=Severity.MODERATE,
    recommendations=[
        "Based on the image analysis, please consult with a healthcare provider for accurate diagnosis",
        "Keep the area clean and dry",
        "Monitor for any changes in symptoms",
        "Take note of any additional symptoms that develop",
    ],
    explanation="I can see you've shared an image for analysis. While I can provide general guidance, "
                "visual symptoms often require professional medical evaluation for accurate diagnosis.",
    doctor_reasons=[
        "Visual symptoms need professional evaluation",
        "The condition may require medical treatment",
        "To rule out serious underlying conditions",
        "For proper diagnosis and treatment plan",
    ],
    follow_up_questions=[
        "How long have you had these symptoms?",
        "Are the symptoms getting worse or better?",
        "Do you have any other symptoms?",
    ],
    safety_notes="Image analysis is for informational purposes only and should not replace professional medical advice.",
)

REASSURANCE_ADVICE = SymptomAdvice(
    severity=Severity.MODERATE,
    recommendations=[
        "First, take a deep breath and don't worry - most health problems get better with time",
        "Tell a trusted adult (parent, teacher, or family member) about how you're feeling",
        "Rest and take it easy - your body needs time to heal",
        "Drink plenty of water to stay hydrated",
        "Eat healthy foods like fruits and vegetables to help your body fight off illness",
    ],
    explanation="It's completely normal to feel worried when you don't feel well. The most important thing "
                "is to let an adult know what's happening so they can help you get the care you need.",
    doctor_reasons=[
        "To make sure you get the right treatment",
        "To check if there's something more serious going on",
        "To help you feel better faster",
        "To give you peace of mind",
    ],
    follow_up_questions=[
        "Have you told an adult about how you're feeling?",
        "Are you able to eat and drink normally?",
        "Do you have any other symptoms we should know about?",
    ],
    safety_notes="Remember, I'm here to help, but a real doctor can examine you and give you the best advice "
                 "for your specific situation.",
)

EMERGENCY_ADVICE = SymptomAdvice(
    severity=Severity.EMERGENCY,
    recommendations=[
        "Call emergency services (911) immediately or tell an adult right away",
        "Stay calm and follow emergency operator instructions",
        "Do not try to drive yourself anywhere - get help from an adult",
        "Keep the person still and comfortable until help arrives",
    ],
    explanation="These symptoms are very serious and need immediate help from a doctor or emergency services. "
                "It's important to tell an adult right away.",
    doctor_reasons=[
        "This is a life-threatening emergency",
        "Immediate medical intervention is required",
        "Professional assessment is critical",
    ],
    follow_up_questions=[
        "Are you still experiencing these symptoms?",
        "Have you called emergency services or told an adult?",
        "Is someone with you to help?",
    ],
    safety_notes="This is an emergency situation requiring immediate medical attention. Tell an adult right away!",
)

HEADACHE_ADVICE = SymptomAdvice(
    severity=Severity.MODERATE,
    recommendations=[
        "Rest in a quiet, dark room",
        "Drink plenty of water",
        "Apply a cool cloth to your forehead",
        "Consider over-the-counter pain relief (consult your doctor)",
    ],
    explanation="Headaches can be caused by dehydration, stress, eye strain, or other factors. "
                "Rest and hydration often help.",
    doctor_reasons=[
        "Severe or persistent headache",
        "Headache with fever or stiff neck",
        "Headache after head injury",
        "Headache with vision changes",
    ],
    follow_up_questions=[
        "How long has the headache lasted?",
        "Is this the worst headache you've ever had?",
        "Do you have any other symptoms?",
    ],
    safety_notes="Seek immediate medical attention for severe headaches or those with concerning symptoms.",
)

STOMACH_ADVICE = SymptomAdvice(
    severity=Severity.MODERATE,
    recommendations=[
        "Sip clear fluids like water, broth, or sports drinks slowly",
        "Avoid solid foods until you feel better",
        "Rest and take it easy - no running around or playing hard",
        "Try bland foods like crackers or toast when you're ready to eat",
        "Tell a parent or adult if you feel really bad",
    ],
    explanation="Stomach problems are common and usually get better with rest and drinking fluids. "
                "It's important to stay hydrated and eat simple foods.",
    doctor_reasons=[
        "Severe or persistent tummy pain that won't go away",
        "Can't keep any fluids down (throwing up everything)",
        "Blood in vomit or when you go to the bathroom",
        "High fever with stomach symptoms",
        "Feeling very weak or dizzy",
    ],
    follow_up_questions=[
        "How long have you had these symptoms?",
        "Are you able to keep fluids down?",
        "Do you have a fever?",
        "Have you told a parent or adult about how you're feeling?",
    ],
    safety_notes="Dehydration can be serious, especially for kids and teens. Tell an adult if you can't keep "
                 "fluids down or feel really bad.",
)

DEFAULT_ADVICE = SymptomAdvice(
    severity=Severity.MODERATE,
    recommendations=[
        "Rest and take it easy - no rough play or sports",
        "Drink plenty of water and stay hydrated",
        "Watch how you're feeling and tell an adult if you feel worse",
        "Tell a parent or adult if symptoms don't get better",
    ],
    explanation="Your symptoms might get better with rest and time. It's important to tell an adult how "
                "you're feeling and get help if you need it.",
    doctor_reasons=[
        "Symptoms don't improve after 2-3 days",
        "Symptoms get worse or you feel much sicker",
        "You develop a high fever",
        "You feel really bad or worried about how you feel",
    ],
    follow_up_questions=[
        "How long have you had these symptoms?",
        "Are the symptoms getting better or worse?",
        "Do you have any other symptoms?",
        "Have you told a parent or adult about how you're feeling?",
    ],
    safety_notes="When in doubt, tell an adult and ask them to help you see a doctor or healthcare provider.",
)


def normalize_text(text):
    return (text or "").lower()


def _contains_any(text, phrases):
    return any(p in text for p in phrases)


def is_emergency(text) -> bool:
    return _contains_any(normalize_text(text), EMERGENCY_KEYWORDS)


def classify(description, has_image: bool = False) -> SymptomAdvice:
    """
    Pick one canned advice record for a free-text description.

    First match wins: image, emergency, meta-question, headache, stomach,
    default. Emergency keywords are checked before meta-question phrasing so
    "can you help, I have chest pain" is treated as an emergency.
    """
    text = normalize_text(description)

    if has_image:
        record = IMAGE_ADVICE
    elif _contains_any(text, EMERGENCY_KEYWORDS):
        record = EMERGENCY_ADVICE
    elif _contains_any(text, META_QUESTION_PHRASES):
        record = REASSURANCE_ADVICE
    elif _contains_any(text, HEADACHE_KEYWORDS):
        record = HEADACHE_ADVICE
    elif _contains_any(text, STOMACH_KEYWORDS):
        record = STOMACH_ADVICE
    else:
        record = DEFAULT_ADVICE
    return record.model_copy()
