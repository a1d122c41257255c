from enum import StrEnum


class LowLevel(StrEnum):
    """Freesound low level analysis descriptors.

    See: https://freesound.org/docs/api/analysis_docs.html
    """

    SPECTRAL_COMPLEXITY = "lowlevel.spectral_complexity"
    SILENCE_RATE_20DB = "lowlevel.silence_rate_20dB"
    ERB_BANDS = "lowlevel.erb_bands"
    AVERAGE_LOUDNESS = "lowlevel.average_loudness"
    SPECTRAL_RMS = "lowlevel.spectral_rms"
    SPECTRAL_KURTOSIS = "lowlevel.spectral_kurtosis"
    BARKBANDS_KURTOSIS = "lowlevel.barkbands_kurtosis"
    SCVALLEYS = "lowlevel.scvalleys"
    SPECTRAL_SPREAD = "lowlevel.spectral_spread"
    PITCH = "lowlevel.pitch"
    DISSONANCE = "lowlevel.dissonance"
    SPECTRAL_ENERGYBAND_HIGH = "lowlevel.spectral_energyband_high"
    GFCC = "lowlevel.gfcc"
    SPECTRAL_FLUX = "lowlevel.spectral_flux"
    SILENCE_RATE_30DB = "lowlevel.silence_rate_30dB"
    SPECTRAL_CONTRAST = "lowlevel.spectral_contrast"
    SPECTRAL_ENERGYBAND_MIDDLE_HIGH = "lowlevel.spectral_energyband_middle_high"
    BARKBANDS_SPREAD = "lowlevel.barkbands_spread"
    SPECTRAL_CENTROID = "lowlevel.spectral_centroid"
    PITCH_SALIENCE = "lowlevel.pitch_salience"
    SILENCE_RATE_60DB = "lowlevel.silence_rate_60dB"
    SPECTRAL_ENTROPY = "lowlevel.spectral_entropy"
    SPECTRAL_ROLLOFF = "lowlevel.spectral_rolloff"
    BARKBANDS = "lowlevel.barkbands"
    SPECTRAL_ENERGYBAND_LOW = "lowlevel.spectral_energyband_low"
    BARKBANDS_SKEWNESS = "lowlevel.barkbands_skewness"
    PITCH_INSTANTANEOUS_CONFIDENCE = "lowlevel.pitch_instantaneous_confidence"
    SPECTRAL_ENERGYBAND_MIDDLE_LOW = "lowlevel.spectral_energyband_middle_low"
    SPECTRAL_STRONGPEAK = "lowlevel.spectral_strongpeak"
    START_FRAME = "lowlevel.startFrame"
    SPECTRAL_DECREASE = "lowlevel.spectral_decrease"
    STOP_FRAME = "lowlevel.stopFrame"
    MFCC = "lowlevel.mfcc"
    SPECTRAL_ENERGY = "lowlevel.spectral_energy"
    SPECTRAL_FLATNESS_DB = "lowlevel.spectral_flatness_db"
    FREQUENCY_BANDS = "lowlevel.frequency_bands"
    ZEROCROSSINGRATE = "lowlevel.zerocrossingrate"
    SPECTRAL_SKEWNESS = "lowlevel.spectral_skewness"
    HFC = "lowlevel.hfc"
    SPECTRAL_CREST = "lowlevel.spectral_crest"


class Rhythm(StrEnum):
    FIRST_PEAK_BPM = "rhythm.first_peak_bpm"
    ONSET_TIMES = "rhythm.onset_times"
    BEATS_COUNT = "rhythm.beats_count"
    BEATS_LOUDNESS = "rhythm.beats_loudness"
    FIRST_PEAK_SPREAD = "rhythm.first_peak_spread"
    SECOND_PEAK_WEIGHT = "rhythm.second_peak_weight"
    BPM = "rhythm.bpm"
    BPM_INTERVALS = "rhythm.bpm_intervals"
    ONSET_COUNT = "rhythm.onset_count"
    SECOND_PEAK_SPREAD = "rhythm.second_peak_spread"
    BEATS_LOUDNESS_BAND_RATIO = "rhythm.beats_loudness_band_ratio"
    SECOND_PEAK_BPM = "rhythm.second_peak_bpm"
    ONSET_RATE = "rhythm.onset_rate"
    BEATS_POSITION = "rhythm.beats_position"
    FIRST_PEAK_WEIGHT = "rhythm.first_peak_weight"


class Tonal(StrEnum):
    HPCP_ENTROPY = "tonal.hpcp_entropy"
    CHORDS_SCALE = "tonal.chords_scale"
    CHORDS_NUMBER_RATE = "tonal.chords_number_rate"
    KEY_STRENGTH = "tonal.key_strength"
    CHORDS_PROGRESSION = "tonal.chords_progression"
    KEY_SCALE = "tonal.key_scale"
    CHORDS_STRENGTH = "tonal.chords_strength"
    KEY_KEY = "tonal.key_key"
    CHORDS_CHANGES_RATE = "tonal.chords_changes_rate"
    CHORDS_COUNT = "tonal.chords_count"
    HPCP_CREST = "tonal.hpcp_crest"
    CHORDS_HISTOGRAM = "tonal.chords_histogram"
    CHORDS_KEY = "tonal.chords_key"
    TUNING_FREQUENCY = "tonal.tuning_frequency"
    HPCP_PEAK_COUNT = "tonal.hpcp_peak_count"
    HPCP = "tonal.hpcp"


class Sfx(StrEnum):
    TEMPORAL_DECREASE = "sfx.temporal_decrease"
    INHARMONICITY = "sfx.inharmonicity"
    PITCH_MIN_TO_TOTAL = "sfx.pitch_min_to_total"
    TC_TO_TOTAL = "sfx.tc_to_total"
    DER_AV_AFTER_MAX = "sfx.der_av_after_max"
    PITCH_MAX_TO_TOTAL = "sfx.pitch_max_to_total"
    TEMPORAL_SPREAD = "sfx.temporal_spread"
    TEMPORAL_KURTOSIS = "sfx.temporal_kurtosis"
    LOGATTACKTIME = "sfx.logattacktime"
    TEMPORAL_CENTROID = "sfx.temporal_centroid"
    TRISTIMULUS = "sfx.tristimulus"
    MAX_DER_BEFORE_MAX = "sfx.max_der_before_max"
    STRONGDECAY = "sfx.strongdecay"
    PITCH_CENTROID = "sfx.pitch_centroid"
    DURATION = "sfx.duration"
    TEMPORAL_SKEWNESS = "sfx.temporal_skewness"
    EFFECTIVE_DURATION = "sfx.effective_duration"
    MAX_TO_TOTAL = "sfx.max_to_total"
    ODDTOEVENHARMONICENERGYRATIO = "sfx.oddtoevenharmonicenergyratio"
    PITCH_AFTER_MAX_TO_BEFORE_MAX_ENERGY_RATIO = "sfx.pitch_after_max_to_before_max_energy_ratio"


type Descriptor = LowLevel | Rhythm | Tonal | Sfx
