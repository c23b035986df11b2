import logging
import traceback

from neuromood.app import create_app
from neuromood.chatbot.chatbot_service import ChatbotService
from neuromood.config.settings import HOST, LOG_FILE, PORT
from neuromood.eeg.emotion_monitor import EmotionMonitor
from neuromood.ml.emotion_classifier import EmotionClassifier
from neuromood.music.player import MusicPlayer
from neuromood.music.track_source import TrackSource

logger = logging.getLogger(__name__)


# Filter out the dashboard's emotion polling from the logs
class LogFilter(logging.Filter):
    def filter(self, record):
        return 'GET /api/emotion' not in record.getMessage()


def configure_logging(log_file: str = LOG_FILE):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file)
        ]
    )

    # Create a dedicated chat logger
    chat_logger = logging.getLogger('chat_data')
    chat_logger.setLevel(logging.INFO)
    chat_file_handler = logging.FileHandler('chat_data.log')
    chat_file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    chat_logger.addHandler(chat_file_handler)

    logging.getLogger('werkzeug').addFilter(LogFilter())


def main():
    configure_logging()

    classifier = EmotionClassifier()
    monitor = EmotionMonitor(classifier)
    chatbot = ChatbotService()
    track_source = TrackSource()
    app = create_app(monitor, chatbot, track_source, MusicPlayer(track_source))

    logger.info("Starting classifier training in the background...")
    classifier.start_training()

    try:
        logger.info(f"Starting Flask server on {HOST}:{PORT}...")
        app.run(host=HOST, port=PORT, threaded=True)
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        logger.error(traceback.format_exc())
        raise
    finally:
        monitor.disconnect()


if __name__ == '__main__':
    main()
