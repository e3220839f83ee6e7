"""All magic values live here — no inline literals anywhere else."""

# Provider endpoints
TRANSCRIPTION_ENDPOINT = "https://api.openai.com/v1/audio/transcriptions"
REFINEMENT_BASE_URL = "https://api.openai.com/v1"

# Phase 1: speech-to-text
WHISPER_MODEL = "whisper-1"
TRANSCRIPTION_TIMEOUT = 600
MAX_UPLOAD_MB: float = 25.0

# Phase 2: refinement
REFINEMENT_MODEL = "gpt-4-turbo-preview"
REFINEMENT_TEMPERATURE: float = 0.7
REFINEMENT_MAX_TOKENS = 4000
REFINEMENT_TIMEOUT = 300
DEFAULT_REFINEMENT_PROMPT = (
    "You are a helpful assistant processing a voice recording. "
    "Organize the transcribed content into clear, well-formatted text. "
    "Fix any obvious transcription errors, improve readability, and maintain the original meaning. "
    "Do not add any new information that wasn't in the original content."
)

# Multipart encoding
BOUNDARY_PREFIX = "Boundary-"
DEFAULT_AUDIO_MIME = "audio/wav"
AUDIO_MIME_TYPES = {
    "m4a": "audio/mp4",
    "mp4": "audio/mp4",
    "mp3": "audio/mpeg",
    "mpeg": "audio/mpeg",
    "mpga": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "oga": "audio/ogg",
    "webm": "audio/webm",
    "flac": "audio/flac",
}

# Recovery artifacts
SAVED_TRANSCRIPTIONS_DIRNAME = "SavedTranscriptions"
SAVED_FILE_PREFIX = "transcription_"
SAVED_FILE_SUFFIX = ".md"
SAVED_FILE_TIMESTAMP = "%Y-%m-%d_%H-%M-%S"
SAVED_HEADER_TIMESTAMP = "%Y-%m-%d %H:%M:%S"
SAVED_TEMPLATE = (
    "# Saved Transcription - {saved_at}\n"
    "\n"
    "Original Audio File: {file_name}\n"
    "\n"
    "## Transcription:\n"
    "{text}\n"
    "\n"
    "---\n"
    "This transcription was automatically saved after a timeout or error occurred during processing.\n"
    "You can copy this text and paste it into a new project note to recover it manually.\n"
)

# Status messages (pushed to the caller's sink)
STEP_ONE = "Step 1/2: "
MSG_FILE_SIZE = "Audio file size: %.1f MB"
MSG_FILE_TOO_LARGE = "Error: File too large (%.1fMB)"
MSG_PREPARING = "Preparing audio file (%s) for transcription..."
MSG_SENDING_AUDIO = "Sending audio to OpenAI for transcription..."
MSG_TRANSCRIPTION_FAILED = "Transcription failed: %s"
MSG_TRANSCRIPTION_TIMEOUT = (
    "Request timed out. Unfortunately, we cannot save the transcription as it wasn't completed."
)
MSG_TRANSCRIPTION_COMPLETE = "Transcription complete!"
MSG_MOVING_TO_STEP_TWO = "Step 1/2: Complete! Moving to step 2..."
MSG_SENDING_REFINEMENT = "Step 2/2: Sending to GPT for processing..."
MSG_REFINEMENT_FAILED = "GPT processing failed: %s. Saving transcription for manual processing..."
MSG_REFINEMENT_TIMEOUT = "GPT processing timed out. Saving transcription for manual processing..."
MSG_REFINEMENT_COMPLETE = "Processing complete! Both steps finished."
MSG_PRESERVED = "Transcript preserved to %s despite failure"
MSG_NOT_PRESERVED = "Transcript could not be preserved; copy it before closing: %s"

# Log messages
MSG_SAVED_TRANSCRIPT = "Saved transcription to %s"
MSG_SAVE_FAILED = "Failed to save transcription: %s"
MSG_STAGE = "Pipeline stage → %s"
MSG_STATUS_SINK_FAILED = "Status sink failed: %s"

# CLI
CLI_NAME = "voice-notes"
MSG_CLI_NO_SAVED = "No saved transcriptions."
MSG_CLI_MISSING_KEY = "OPENAI_API_KEY is not configured — set it in .env"
MSG_CLI_WROTE = "Wrote %s"
