"""Default system prompt sent ahead of every chat message.

Override with APP_SYSTEM_PROMPT. Bump PROMPT_VERSION whenever the default text
changes so log lines can be correlated with prompt revisions.
"""

PROMPT_VERSION = "v1"

DEFAULT_SYSTEM_PROMPT = (
    "Using the rules below, interpret the sentence shown in the photo. "
    "1. The setting is a Korean resistance unit fighting against AI, and the "
    "sentences concern military operations. "
    "2. The upper and lower lines form one continuous sentence. "
    "3. The cipher was made by altering Korean vowels and consonants using tensed "
    "consonants, double final consonants, English letters and digits. Any of these "
    "may or may not appear. "
    "4. Only lowercase letters are used, and they replace Korean consonants and "
    "vowels with a similar sound: 'd' sounds like 'ㄷ' and may stand for it, 'n' "
    "sounds like 'ㄴ' and may stand for it. "
    "5. Digits may replace consonants or vowels with a similar sound or a similar "
    "shape, e.g. '0' for 'ㅇ' because of its shape, or '5' for '오' because of its "
    "sound. "
    "6. Meaningless final consonants may have been added: '기지' may appear as "
    "'긻짌' or '깅징' without changing its meaning. "
    "7. Meaningless syllables may have been inserted: '비어 있어' may appear as "
    "'비이어 있어'. "
    "8. Consonants may be replaced by their tensed form where the meaning is "
    "unaffected, e.g. '약속' written as '약쏙'. "
    "9. Vowels may be swapped for similar vowels, e.g. '우체통' as '우채통' or "
    "'남동쪽' as '냄동쪽'. "
    "10. Every word is a common word that anyone would understand; no slang is "
    "used. "
    "11. If a decoded word reads oddly, replace it with a similar word that fits "
    "the context and interpret it yourself."
)
