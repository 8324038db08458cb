"""
Nudge Template Tables

Immutable configuration data injected into NudgePolicy. Messages are
empathetic and non-clinical - no fear language.
"""

from types import MappingProxyType

from models.nudge import ActionType, NudgeTemplate, NudgeTone, NudgeType


DEFAULT_LANGUAGE = "en"


# =============================================================================
# PER-ANALYSIS NUDGES (keyed by language, then template key)
# =============================================================================

ENGLISH_NUDGES = MappingProxyType({
    # Celebration (no drift)
    "high_engagement": NudgeTemplate(
        type=NudgeType.CELEBRATION,
        tone=NudgeTone.CELEBRATORY,
        title="Great week!",
        message="You completed {percent}% of your care tasks this week. That's wonderful consistency!",
        emoji="⭐",
        priority=3,
    ),
    # Improvement recognition
    "improving_trend": NudgeTemplate(
        type=NudgeType.CELEBRATION,
        tone=NudgeTone.CELEBRATORY,
        title="You're doing great!",
        message="We see you're getting back on track. Your consistency is improving, keep it up!",
        emoji="📈",
        priority=2,
    ),
    # Gentle reminders (mild drift)
    "missed_logging": NudgeTemplate(
        type=NudgeType.REMINDER,
        tone=NudgeTone.GENTLE,
        title="Quick check-in",
        message="We noticed fewer logs lately. Would you like to add a quick entry? Even a small note helps!",
        emoji="📝",
        priority=2,
        action_label="Log now",
        action_type=ActionType.LOG,
    ),
    "timing_shift": NudgeTemplate(
        type=NudgeType.TIP,
        tone=NudgeTone.WARM,
        title="Flexible timing",
        message="Your schedule seems different lately. Would you like to adjust your reminder times to better fit your day?",
        emoji="⏰",
        priority=3,
        action_label="Adjust times",
        action_type=ActionType.ADJUST,
    ),
    # Supportive (moderate drift)
    "life_happens": NudgeTemplate(
        type=NudgeType.SUPPORT,
        tone=NudgeTone.UNDERSTANDING,
        title="Life gets busy",
        message="We understand things can get hectic. Your care plan is still here whenever you're ready. No pressure.",
        emoji="💙",
        priority=2,
    ),
    "small_steps": NudgeTemplate(
        type=NudgeType.ENCOURAGEMENT,
        tone=NudgeTone.WARM,
        title="One step at a time",
        message="Even checking in once today counts. Small steps are still steps forward.",
        emoji="👣",
        priority=2,
        action_label="Quick log",
        action_type=ActionType.LOG,
    ),
    # Recovery support (significant drift)
    "reduced_plan": NudgeTemplate(
        type=NudgeType.SUPPORT,
        tone=NudgeTone.UNDERSTANDING,
        title="Lighter load ahead",
        message="We've temporarily reduced your daily tasks to make things easier. Focus on what feels manageable.",
        emoji="🍃",
        priority=1,
    ),
    "welcome_back": NudgeTemplate(
        type=NudgeType.ENCOURAGEMENT,
        tone=NudgeTone.WARM,
        title="Welcome back!",
        message="We've simplified your plan while you were away. Ready to ease back in at your own pace?",
        emoji="🌱",
        priority=1,
        action_label="View plan",
        action_type=ActionType.VIEW,
    ),
})

DEFAULT_NUDGE_CATALOG = MappingProxyType({
    DEFAULT_LANGUAGE: ENGLISH_NUDGES,
})


# =============================================================================
# SERVER MESSAGE POOLS (category -> language -> messages)
# =============================================================================

DEFAULT_SERVER_TEMPLATES = MappingProxyType({
    "encouragement": MappingProxyType({
        "en": (
            "You're doing a wonderful job staying consistent. Every small step matters!",
            "Your dedication to self-care is truly inspiring. Keep it up!",
            "We noticed you've been on track lately. That's amazing progress!",
        ),
        "es": (
            "¡Estás haciendo un trabajo maravilloso manteniéndote constante!",
            "Tu dedicación al autocuidado es verdaderamente inspiradora.",
            "Hemos notado que has estado en el buen camino. ¡Es un progreso increíble!",
        ),
        "hi": (
            "आप निरंतर रहने में अद्भुत काम कर रहे हैं। हर छोटा कदम मायने रखता है!",
            "आत्म-देखभाल के प्रति आपका समर्पण वास्तव में प्रेरणादायक है।",
            "हमने देखा कि आप हाल ही में सही रास्ते पर हैं। यह अद्भुत प्रगति है!",
        ),
    }),
    "gentle_reminder": MappingProxyType({
        "en": (
            "Life gets busy sometimes. Would you like to log a quick update when you have a moment?",
            "We're here whenever you're ready. No pressure, just support.",
            "It's been a little quiet. Everything okay? We're here for you.",
        ),
        "es": (
            "La vida se pone ocupada a veces. ¿Te gustaría registrar una actualización rápida?",
            "Estamos aquí cuando estés listo. Sin presión, solo apoyo.",
            "Ha estado un poco tranquilo. ¿Todo bien? Estamos aquí para ti.",
        ),
        "hi": (
            "जीवन कभी-कभी व्यस्त हो जाता है। क्या आप एक त्वरित अपडेट लॉग करना चाहेंगे?",
            "जब भी आप तैयार हों, हम यहां हैं। कोई दबाव नहीं, बस समर्थन।",
            "थोड़ी शांति रही है। सब ठीक है? हम आपके लिए यहां हैं।",
        ),
    }),
    "supportive": MappingProxyType({
        "en": (
            "Looks like your routine's been busy lately. Would a lighter plan for the next few days help?",
            "We understand routines can be challenging. How about we simplify things for now?",
            "Taking a step back is okay. Would you like us to adjust your daily goals?",
        ),
        "es": (
            "Parece que tu rutina ha estado ocupada últimamente. ¿Te ayudaría un plan más ligero?",
            "Entendemos que las rutinas pueden ser desafiantes. ¿Qué tal si simplificamos las cosas?",
            "Está bien dar un paso atrás. ¿Te gustaría que ajustemos tus metas diarias?",
        ),
        "hi": (
            "लगता है आपकी दिनचर्या व्यस्त रही है। क्या कुछ दिनों के लिए हल्की योजना मदद करेगी?",
            "हम समझते हैं कि दिनचर्या चुनौतीपूर्ण हो सकती है। चीजों को सरल बनाएं?",
            "एक कदम पीछे लेना ठीक है। क्या आप चाहेंगे कि हम आपके दैनिक लक्ष्यों को समायोजित करें?",
        ),
    }),
    "celebration": MappingProxyType({
        "en": (
            "🎉 You're back on track! Your consistency is really shining through.",
            "Welcome back! We're so glad to see you engaging again.",
            "Your comeback is inspiring! Every effort counts.",
        ),
        "es": (
            "🎉 ¡Estás de vuelta en el camino! Tu consistencia realmente brilla.",
            "¡Bienvenido de vuelta! Nos alegra mucho verte comprometido de nuevo.",
            "¡Tu regreso es inspirador! Cada esfuerzo cuenta.",
        ),
        "hi": (
            "🎉 आप वापस रास्ते पर हैं! आपकी निरंतरता वास्तव में चमक रही है।",
            "वापसी पर स्वागत है! आपको फिर से जुड़े हुए देखकर खुशी हुई।",
            "आपकी वापसी प्रेरणादायक है! हर प्रयास मायने रखता है।",
        ),
    }),
})


RECOMMENDATION_MESSAGES = MappingProxyType({
    "en": "We're considering temporarily reducing daily tasks to help you get back on track.",
    "es": "Consideramos reducir temporalmente tus tareas diarias para ayudarte a retomar el ritmo.",
    "hi": "हम आपको फिर से शुरू करने में मदद के लिए अस्थायी रूप से दैनिक कार्यों को कम करने पर विचार कर रहे हैं।",
})


# Tone -> presentation classes
NUDGE_TONE_STYLES = MappingProxyType({
    NudgeTone.CELEBRATORY: MappingProxyType({
        "bgClass": "bg-success/10",
        "borderClass": "border-success/30",
        "iconClass": "text-success",
    }),
    NudgeTone.WARM: MappingProxyType({
        "bgClass": "bg-primary/10",
        "borderClass": "border-primary/30",
        "iconClass": "text-primary",
    }),
    NudgeTone.GENTLE: MappingProxyType({
        "bgClass": "bg-muted/50",
        "borderClass": "border-border",
        "iconClass": "text-muted-foreground",
    }),
    NudgeTone.UNDERSTANDING: MappingProxyType({
        "bgClass": "bg-info/10",
        "borderClass": "border-info/30",
        "iconClass": "text-info",
    }),
})

DEFAULT_TONE_STYLE = MappingProxyType({
    "bgClass": "bg-card",
    "borderClass": "border-border",
    "iconClass": "text-foreground",
})
