import os

from dotenv import load_dotenv

# .env.local wins over .env; real environment variables win over both
load_dotenv(".env.local")
load_dotenv()

# EEG Channel Configuration
CHANNEL_NAMES = ['eeg1', 'eeg2', 'eeg3', 'eeg4', 'eeg5', 'eeg6', 'eeg7', 'eeg8']
CHANNEL_COUNT = len(CHANNEL_NAMES)

# Simulated signal range (raw units)
SIGNAL_MIN = -50.0
SIGNAL_MAX = 50.0
PATTERN_JITTER = 5.0

# Sample buffer / timers
BUFFER_SIZE = int(os.environ.get("BUFFER_SIZE", 100))
ACQUISITION_INTERVAL = float(os.environ.get("ACQUISITION_INTERVAL", 0.1))  # seconds
CLASSIFICATION_INTERVAL = float(os.environ.get("CLASSIFICATION_INTERVAL", 2.0))  # seconds

# Emotion Classes (order is the tie-break order)
EMOTION_LABELS = ['happy', 'sad', 'angry', 'calm', 'fear', 'surprise', 'neutral']
DEFAULT_EMOTION = 'neutral'

# Model Configuration
HIDDEN_LAYERS = (10, 10)
TRAINING_ITERATIONS = 2000
ERROR_THRESHOLD = 0.005
LEARNING_RATE = 0.05
_seed = os.environ.get("CLASSIFIER_SEED", "")
CLASSIFIER_SEED = int(_seed) if _seed.strip() else None

# Chatbot Configuration
OPENROUTER_API_KEY = os.environ.get("OPENROUTER_API_KEY", "")
OPENROUTER_BASE_URL = os.environ.get("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
PLACEHOLDER_API_KEY = "your_openrouter_key_here"
CHAT_MODEL = os.environ.get("CHAT_MODEL", "deepseek/deepseek-v3-mini")
CHAT_TIMEOUT = float(os.environ.get("CHAT_TIMEOUT", 20.0))  # seconds
MAX_HISTORY = 10
WELCOME_MESSAGE = (
    "Hello! How are you feeling today? "
    "I'll adapt my responses based on your emotional state."
)

# Music Configuration
YOUTUBE_API_KEY = os.environ.get("YOUTUBE_API_KEY", "")
YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
TRACK_SEARCH_TIMEOUT = float(os.environ.get("TRACK_SEARCH_TIMEOUT", 5.0))  # seconds
MAX_TRACKS = 5

# Server Configuration
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", 5000))
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
LOG_FILE = os.environ.get("LOG_FILE", "server.log")
