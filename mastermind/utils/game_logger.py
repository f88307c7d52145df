"""
Game Logger Module for the Mastermind Server

This module provides structured logging for user actions, server responses,
game events and leaderboard updates.
"""

import logging
import json
from collections import Counter
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the Mastermind game server.

    Features:
    - User action tracking with user/IP identification
    - Server response logging
    - Game and leaderboard event logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('mastermind_game')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        # File handler for detailed logs
        file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        # Stats read the file the handler writes to, not today's date
        self.log_file = Path(file_handler.baseFilename)

        return logger

    def _get_user_identity(self, request) -> Dict[str, Optional[str]]:
        """Extract user identity information from request."""
        user = getattr(request, 'user', None) or {}
        return {
            'user_ip': getattr(request, 'remote_addr', None) or 'unknown',
            'user_id': user.get('id'),
            'username': user.get('username')
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          user_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_user_action(self,
                        request,
                        action: str,
                        game_id: Optional[str] = None,
                        **kwargs):
        """
        Log user actions with full context.

        Args:
            request: Flask request object
            action: Type of action (e.g., 'new_game', 'submit_guess', 'get_game')
            game_id: Game identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'game_id': game_id,
            'endpoint': getattr(request, 'endpoint', None),
            'method': getattr(request, 'method', None),
            'url': getattr(request, 'url', None),
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, self._get_user_identity(request), details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            game_id: Optional[str] = None,
                            **kwargs):
        """
        Log server responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to client
            game_id: Game identifier if applicable
            **kwargs: Additional details to log
        """
        details = {
            'game_id': game_id,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': self._sanitize_response_data(response_data),
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, self._get_user_identity(request), details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       game_id: Optional[str],
                       event: str,
                       user_id: Optional[str] = None,
                       **kwargs):
        """
        Log game-specific events (wins, losses, leaderboard updates).

        Args:
            game_id: Game identifier
            event: Type of game event (e.g., 'game_won', 'game_lost', 'leaderboard_updated')
            user_id: Owning user
            **kwargs: Additional game details
        """
        user_info = {'user_ip': None, 'user_id': user_id, 'username': kwargs.pop('username', None)}
        details = {
            'game_id': game_id,
            **kwargs
        }

        log_message = self._create_log_entry('GAME_EVENT', event, user_info, details)
        self.logger.info(log_message)

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  game_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
            game_id: Game identifier if applicable
        """
        details = {
            'game_id': game_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, self._get_user_identity(request), details)
        self.logger.error(log_message)

    # Payload keys reduced to a short summary before logging
    _SUMMARIZED_LISTS = ('games', 'leaderboard', 'colors')

    def _summarize_state(self, state: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'status': state.get('status'),
            'difficulty': state.get('difficulty'),
            'total_guesses': state.get('total_guesses'),
            'attempts_remaining': state.get('attempts_remaining'),
            'secret_revealed': state.get('secret_code') is not None
        }

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Summarize large payloads; secret codes never reach the log file."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = {}
        for key, value in data.items():
            if key == 'state' and isinstance(value, dict):
                sanitized[key] = self._summarize_state(value)
            elif key == 'result' and isinstance(value, dict):
                sanitized[key] = {k: v for k, v in value.items() if k not in ('secret_code', 'guess')}
            elif key in self._SUMMARIZED_LISTS and isinstance(value, list):
                sanitized[key] = {'count': len(value)}
            else:
                sanitized[key] = value
        return sanitized

    def get_log_stats(self) -> Dict[str, Any]:
        """Counts of entries per event type in the active log file (useful for monitoring)."""
        log_file = self.log_file
        if not log_file.exists():
            return {'error': 'No log file found'}

        counts = Counter()
        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    # Lines are "<time> | <level> | <json payload>"
                    _, _, payload = line.rpartition(' | ')
                    if not payload.strip():
                        continue
                    counts['total_entries'] += 1
                    try:
                        counts[json.loads(payload).get('event_type', 'OTHER')] += 1
                    except ValueError:
                        counts['OTHER'] += 1
            size_mb = round(log_file.stat().st_size / (1024 * 1024), 2)
        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}

        return {
            'log_file': str(log_file),
            'file_size_mb': size_mb,
            'total_entries': counts['total_entries'],
            'user_actions': counts['USER_ACTION'],
            'server_responses': counts['SERVER_RESPONSE_SUCCESS'] + counts['SERVER_RESPONSE_ERROR'],
            'game_events': counts['GAME_EVENT'],
            'errors': counts['ERROR'] + counts['SERVER_RESPONSE_ERROR'],
            'other': counts['OTHER']
        }


# Global logger instance
game_logger = GameLogger(log_dir=Config.LOG_DIR, level=Config.LOG_LEVEL)
