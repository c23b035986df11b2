import time
import logging
import threading
import traceback
from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from neuromood.chatbot.chatbot_service import ChatbotService, select_tone
from neuromood.config.settings import CORS_ORIGINS, EMOTION_LABELS
from neuromood.dashboard import build_dashboard, emotion_color
from neuromood.eeg.emotion_monitor import EmotionMonitor
from neuromood.music.player import MusicPlayer
from neuromood.music.track_source import TrackSource

logger = logging.getLogger(__name__)
chat_logger = logging.getLogger('chat_data')


def _error(message: str, status: int):
    return jsonify({'error': message}), status


def _server_error(context: str, e: Exception):
    logger.error(f"Error in {context} endpoint: {e}")
    logger.error(traceback.format_exc())
    return _error('Internal server error occurred. Please try again.', 500)


def create_app(
    monitor: EmotionMonitor,
    chatbot: ChatbotService,
    track_source: TrackSource,
    player: Optional[MusicPlayer] = None,
) -> Flask:
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": CORS_ORIGINS}})

    player = player or MusicPlayer(track_source)
    # chat history and the playback queue are shared across request threads
    session_lock = threading.Lock()

    @app.route('/api/emotion', methods=['GET'])
    def get_emotion():
        try:
            state = monitor.state()
            state.update({
                'color': emotion_color(state['emotion'] if state['detected'] else None),
                'classifier': monitor.classifier.state.value,
                'train_error': monitor.classifier.train_error,
                'timestamp': datetime.now().isoformat(),
            })
            return jsonify(state)
        except Exception as e:
            return _server_error('emotion', e)

    @app.route('/api/connect', methods=['POST'])
    def connect():
        data = request.get_json(silent=True) or {}
        simulated = data.get('simulatedEmotion')
        if simulated is not None and simulated not in EMOTION_LABELS:
            return _error(f"Unknown emotion: {simulated}", 400)
        try:
            if not monitor.connect(simulated_emotion=simulated):
                return _error('Already connected', 409)
            return jsonify({'connected': True, 'simulated_emotion': monitor.simulated_emotion})
        except Exception as e:
            return _server_error('connect', e)

    @app.route('/api/disconnect', methods=['POST'])
    def disconnect():
        monitor.disconnect()
        return jsonify({'connected': False})

    @app.route('/api/simulate', methods=['POST'])
    def simulate():
        data = request.get_json(silent=True) or {}
        emotion = data.get('emotion')
        if emotion is not None and emotion not in EMOTION_LABELS:
            return _error(f"Unknown emotion: {emotion}", 400)
        monitor.set_simulated_emotion(emotion)
        return jsonify({'simulated_emotion': emotion})

    @app.route('/api/chat', methods=['POST'])
    def chat():
        data = request.get_json(silent=True) or {}
        message = data.get('message')
        if not isinstance(message, str) or not message.strip():
            return _error('Message cannot be empty', 400)

        current_emotion = monitor.detected_emotion
        chat_logger.info(f"User: {message}")
        chat_logger.info(f"Current Emotion: {current_emotion or 'none'}")
        try:
            with session_lock:
                response = chatbot.get_response(message, current_emotion)
        except Exception as e:
            return _server_error('chat', e)
        chat_logger.info(f"Bot: {response}")

        return jsonify({
            'response': response,
            'emotion': current_emotion,
            'tone': select_tone(current_emotion),
            'timestamp': datetime.now().isoformat(),
        })

    @app.route('/api/chat/history', methods=['GET'])
    def chat_history():
        with session_lock:
            return jsonify({'messages': list(chatbot.conversation_history)})

    @app.route('/api/chat/clear', methods=['POST'])
    def clear_chat():
        with session_lock:
            chatbot.clear_history()
        return jsonify({'status': 'success'})

    @app.route('/api/youtube-search', methods=['GET'])
    def youtube_search():
        query = request.args.get('query', '')
        if not query.strip():
            return jsonify({'tracks': [], 'error': 'Missing query parameter'}), 400
        try:
            tracks = track_source.search(query)
        except Exception as e:
            return _server_error('youtube-search', e)
        return jsonify({'tracks': [t.to_dict() for t in tracks]})

    @app.route('/api/music', methods=['GET'])
    def music():
        emotion = monitor.detected_emotion
        try:
            with session_lock:
                player.sync(emotion)
                state = player.state()
        except Exception as e:
            return _server_error('music', e)
        return jsonify(state)

    @app.route('/api/music/play', methods=['POST'])
    def music_play():
        data = request.get_json(silent=True) or {}
        with session_lock:
            try:
                player.play(data.get('trackId'))
            except KeyError as e:
                return _error(str(e), 404)
            return jsonify(player.state())

    @app.route('/api/music/pause', methods=['POST'])
    def music_pause():
        with session_lock:
            player.pause()
            return jsonify(player.state())

    @app.route('/api/music/next', methods=['POST'])
    def music_next():
        with session_lock:
            player.next_track()
            return jsonify(player.state())

    @app.route('/api/music/volume', methods=['POST'])
    def music_volume():
        data = request.get_json(silent=True) or {}
        volume = data.get('volume')
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            return _error('Volume must be a number between 0 and 100', 400)
        with session_lock:
            player.set_volume(volume)
            return jsonify(player.state())

    @app.route('/api/dashboard', methods=['GET'])
    def dashboard():
        with session_lock:
            return jsonify(build_dashboard(monitor, player))

    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({
            'status': 'healthy',
            'classifier': monitor.classifier.state.value,
            'connected': monitor.is_connected,
            'llm': chatbot.has_llm,
            'timestamp': time.time(),
        })

    return app
