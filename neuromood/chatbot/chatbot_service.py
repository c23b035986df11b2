import random
import logging
import traceback
from typing import Dict, List, Optional

import openai

from neuromood.config.settings import (
    CHAT_MODEL,
    CHAT_TIMEOUT,
    DEFAULT_EMOTION,
    MAX_HISTORY,
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
    PLACEHOLDER_API_KEY,
    WELCOME_MESSAGE,
)
from neuromood.errors import TransportError
from neuromood.music.genre import DEFAULT_GENRE, select_genre

logger = logging.getLogger(__name__)

# Mapping of emotions to tone instructions for the LLM
EMOTION_TO_TONE = {
    'happy': 'enthusiastic and upbeat',
    'sad': 'empathetic and comforting',
    'angry': 'calm and de-escalating',
    'calm': 'peaceful and measured',
    'fear': 'reassuring and supportive',
    'surprise': 'engaged and attentive',
    'neutral': 'balanced and informative',
}
DEFAULT_TONE = 'neutral and helpful'

# Canned replies for when no API key is configured or the LLM call fails
MOCK_RESPONSES = {
    'happy': [
        "That's fantastic! I'm so happy to hear that. What else is making you smile today?",
        "Wonderful news! Your positive energy is contagious. Tell me more!",
        "I'm thrilled things are going well for you! Let's keep that positive momentum going!",
    ],
    'sad': [
        "I understand that feeling. It's okay to feel down sometimes. Would you like to talk about what's troubling you?",
        "I'm here for you during this difficult time. Remember that these feelings won't last forever.",
        "It sounds like you're going through a tough moment. Would sharing more about it help lighten the burden?",
    ],
    'angry': [
        "I understand you're feeling frustrated. Let's take a step back and look at this calmly.",
        "It makes sense that you'd feel that way. Once we process these feelings, we can think about constructive next steps.",
        "Your feelings are valid. Would it help to talk through what triggered this reaction?",
    ],
    'calm': [
        "It sounds like you're in a peaceful state of mind. That's a wonderful place to be for reflection.",
        "This tranquil energy is perfect for mindful conversation. What's on your mind today?",
        "I appreciate your centered approach. How can we maintain this balanced perspective?",
    ],
    'fear': [
        "It's natural to feel anxious about this. Remember that you've overcome difficult situations before.",
        "I understand your concerns. Let's break this down into smaller, manageable parts.",
        "Your feelings of worry are completely valid. Would it help to discuss specific strategies for this situation?",
    ],
    'surprise': [
        "Wow, that's unexpected! I'd love to hear more about this development.",
        "That's quite the surprise! How are you processing this new information?",
        "I can understand why that would catch you off guard! What aspect of this surprises you most?",
    ],
    'neutral': [
        "Thanks for sharing that with me. Would you like to explore this topic further?",
        "I appreciate your perspective. What other thoughts do you have on this matter?",
        "That's an interesting point. Could you elaborate on what you mean?",
    ],
}


def select_tone(emotion: Optional[str]) -> str:
    if not emotion:
        return DEFAULT_TONE
    return EMOTION_TO_TONE.get(emotion, DEFAULT_TONE)


def build_system_message(emotion: Optional[str]) -> Dict[str, str]:
    return {
        'role': 'system',
        'content': (
            f"You are a helpful assistant. The user is currently feeling {emotion or 'neutral'}. "
            f"Please respond in a {select_tone(emotion)} tone. Be concise and helpful."
        ),
    }


def build_messages(history: List[Dict[str, str]], emotion: Optional[str]) -> List[Dict[str, str]]:
    """Prepend the emotion-aware system message to the role-tagged history."""
    return [build_system_message(emotion)] + [
        {'role': message['role'], 'content': message['content']} for message in history
    ]


def get_mock_response(emotion: Optional[str], rng: random.Random = None) -> str:
    responses = MOCK_RESPONSES.get(emotion or DEFAULT_EMOTION, MOCK_RESPONSES[DEFAULT_EMOTION])
    return (rng or random).choice(responses)


class ChatbotService:
    def __init__(
        self,
        api_key: str = OPENROUTER_API_KEY,
        model: str = CHAT_MODEL,
        base_url: str = OPENROUTER_BASE_URL,
        timeout: float = CHAT_TIMEOUT,
        client=None,
        rng: random.Random = None,
    ):
        self.model = model
        self.rng = rng or random.Random()
        self.client = client
        if self.client is None and api_key and api_key != PLACEHOLDER_API_KEY:
            self.client = openai.OpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        if self.client is None:
            logger.warning("No chat API key configured; replies will be canned responses")
        self.conversation_history: List[Dict[str, str]] = []
        self.clear_history()

    @property
    def has_llm(self) -> bool:
        return self.client is not None

    def clear_history(self):
        """Reset the conversation to the welcome message."""
        self.conversation_history = [{'role': 'assistant', 'content': WELCOME_MESSAGE}]

    def _complete(self, messages: List[Dict[str, str]]) -> str:
        try:
            response = self.client.chat.completions.create(model=self.model, messages=messages)
        except openai.OpenAIError as e:
            raise TransportError(f"Chat completion failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise TransportError(f"Malformed chat completion response: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise TransportError("Chat completion returned an empty reply")
        return content.strip()

    def get_response(self, user_message: str, current_emotion: Optional[str] = None) -> str:
        """Answer a user turn in a tone that matches the detected emotion."""
        if not user_message or not user_message.strip():
            raise ValueError("Message cannot be empty")

        self.conversation_history.append({'role': 'user', 'content': user_message})

        if not self.has_llm:
            response = get_mock_response(current_emotion, self.rng)
        else:
            try:
                logger.info("Attempting to generate response...")
                response = self._complete(build_messages(self.conversation_history, current_emotion))
                logger.info("Successfully generated response")
            except TransportError as e:
                logger.error(f"Error generating response: {e}")
                logger.error(traceback.format_exc())
                response = get_mock_response(current_emotion, self.rng)

        self.conversation_history.append({'role': 'assistant', 'content': response})
        if len(self.conversation_history) > MAX_HISTORY:
            self.conversation_history = self.conversation_history[-MAX_HISTORY:]
        return response

    def recommend_genre(self, emotion: Optional[str]) -> str:
        """Ask the LLM for a genre matching the emotion, falling back to the lookup table."""
        if not emotion:
            return DEFAULT_GENRE
        if not self.has_llm:
            return select_genre(emotion)

        messages = build_messages([{
            'role': 'user',
            'content': (
                f"I'm feeling {emotion}. What genre of music would be appropriate for this "
                "emotional state? Keep your answer to just the genre name, nothing else."
            ),
        }], DEFAULT_EMOTION)
        try:
            genre = self._complete(messages).strip('"').strip()
        except TransportError as e:
            logger.error(f"Error getting music recommendation: {e}")
            return select_genre(emotion)
        return genre or select_genre(emotion)
