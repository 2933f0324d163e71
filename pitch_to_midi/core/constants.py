"""Global constants for pitch-to-midi.

These describe the geometry of the pitch-detection model output: the
analysis frame rate, the inference window and its overlap, and the pitch
bin layout of the onset/frame/contour matrices.
"""

# Audio / analysis frames
AUDIO_SAMPLE_RATE = 22050
FFT_HOP = 256
AUDIO_WINDOW_LENGTH = 2  # seconds per inference window
AUDIO_N_SAMPLES = AUDIO_SAMPLE_RATE * AUDIO_WINDOW_LENGTH - FFT_HOP
ANNOTATIONS_FPS = AUDIO_SAMPLE_RATE // FFT_HOP
ANNOT_N_FRAMES = ANNOTATIONS_FPS * AUDIO_WINDOW_LENGTH

# Inference window overlap
N_OVERLAPPING_FRAMES = 30

# Pitch bins
ANNOTATIONS_N_SEMITONES = 88  # number of piano keys
ANNOTATIONS_BASE_FREQUENCY = 27.5  # A0, lowest key on a piano
CONTOURS_BINS_PER_SEMITONE = 3
N_FREQ_BINS_NOTES = ANNOTATIONS_N_SEMITONES
N_FREQ_BINS_CONTOURS = ANNOTATIONS_N_SEMITONES * CONTOURS_BINS_PER_SEMITONE

# MIDI ranges
MIDI_OFFSET = 21  # MIDI pitch of bin 0
PIANO_MIN = 21  # A0
PIANO_MAX = 108  # C8
N_PITCH_BEND_TICKS = 8192  # pitch wheel centre

# Musical defaults
DEFAULT_TEMPO = 120
DEFAULT_PROGRAM = 4  # Electric Piano 1
DEFAULT_TIME_SIGNATURE = (4, 4)
TICKS_PER_BEAT = 480
MIDI_CHANNELS = 16

PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
