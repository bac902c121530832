"""
Constants used for candidate extraction, discovery, and validation.
"""

# Title Case runs may be joined by these lowercase connectors (plus "&" and "vs").
TITLE_CONNECTORS = (
    "for", "from", "with", "the", "and", "of", "a", "an", "in", "on", "at", "to",
    "is", "or", "not", "no", "it", "its", "my", "his", "her", "as", "so", "but", "by",
)

# Title Case phrases that are conversation, not titles
TITLE_NOISE = frozenset({
    "I Am", "I Was", "I Think", "I Love", "I Just", "I Mean", "I Also",
    "Oh My", "My Dad", "My Dad's", "My Father", "My Mom", "My Kids", "My Wife", "My Husband",
    "Not Sure", "Also My", "So Good", "Pretty Good", "Just Watched", "Looking At", "Hard Mode",
    "Dad Movie", "Dad Movies", "Good Movie", "Great Movie", "Best Movie", "Any Movie",
    "Favorite Movie", "This Movie", "That Movie", "Love That Movie",
    "Fun Fact", "Pro Tip", "Hot Take", "Great Answer", "Good Call", "Same Here", "Me Too",
    "Honorable Mention",
})

# Quoted phrases (lowercase) that are generic category talk
QUOTED_NOISE = frozenset({
    "dad movie", "dad movies", "favorite movie", "best movie",
    "movie", "movies", "film", "films", "this one", "that one",
})

# Quoted phrases led by these words are speech, not titles
QUOTED_PREFIXES = (
    "my", "your", "i", "we", "he", "she", "it", "this", "that",
    "if", "but", "when", "where", "what", "why", "how",
)

# Internet acronyms that look like ALL CAPS titles
ACRONYMS = frozenset({
    "WTAF", "OMFG", "LMAO", "LMBO", "OMG", "LOL", "WTF", "IMO", "IMHO",
    "IIRC", "TIL", "PSA", "FYI", "RIP", "AMA",
})

# A line starting with one of these reads as a sentence, not a standalone answer
SENTENCE_PREFIXES = (
    "i ", "my ", "we ", "he ", "she ", "it ", "they ", "you ",
    "this is", "that is", "if ", "but ", "when ", "where ", "what ", "why ", "how ",
    "there ", "here ", "also ", "just ", "not ",
    "can ", "could ", "would ", "should ", "do ", "does ", "did ",
    "have ", "has ", "had ", "was ", "were ",
    "the question", "growing up", "used to",
    "i've ", "i'm ", "it's ", "that's ", "there's ",
    "in the ", "in my ", "in a ", "in order", "in chronological",
    "for the ", "for my ", "for a ",
)

# Hashtags (lowercased after segmentation) that tag a post rather than name a title
HASHTAG_NOISE = frozenset({
    "now playing", "now watching", "now listening", "currently reading", "song of the day",
    "music monday", "throwback thursday", "new music friday", "movie night", "film twitter",
});

# Reaction words that are also titles in most databases
REACTION_STOPWORDS = frozenset({
    "yes", "no", "yep", "nope", "same", "agreed", "exactly", "absolutely",
    "lol", "lmao", "omg", "okay", "ok", "right", "correct", "true",
    "nice", "cool", "great", "amazing", "perfect", "classic",
})

# Words ignored when comparing an alias with its canonical
ALIGNMENT_STOPWORDS = frozenset({
    "the", "a", "an", "of", "and", "in", "on", "at", "to", "for", "from", "with",
    "by", "or", "is", "it", "its", "as", "so", "but", "not", "no",
})

# Significant-word comparison for merging also ignores contractions
MERGE_STOPWORDS = ALIGNMENT_STOPWORDS | frozenset({
    "it's", "i'm", "don't", "won't", "can't", "didn't", "wasn't", "isn't", "aren't",
    "couldn't", "wouldn't", "shouldn't", "hasn't", "haven't", "ain't", "let's",
    "that's", "what's", "who's", "he's", "she's", "we're", "they're", "you're",
    "i'll", "you'll", "we'll", "they'll",
})

# Words that commonly precede a title without signalling a truncated phrase
PREFIX_SKIP_WORDS = frozenset({
    "the", "a", "an",
    "by", "of", "from", "in", "on", "for", "with", "at", "to", "about",
    "my", "your", "his", "her", "its", "our", "their",
    "and", "or", "but",
})

# Leading words stripped before grouping canonicals for merge
MERGE_LEADING_CONTRACTIONS = ("it's", "it is", "don't", "i")
LEADING_ARTICLES = ("the", "a", "an")

# Common single words that are also song titles; too frequent to reverse-scan for
EMBED_STOP_WORDS = frozenset({
    "just", "stay", "love", "home", "fire", "gold", "time", "help", "hero", "money",
    "hurt", "crazy", "happy", "fame", "free", "human", "lean", "high", "lost", "glow",
    "feel", "real", "dreams", "closer", "issues", "rush", "alive", "torn", "blow", "wish",
    "burn", "hello", "sorry", "driver", "cool", "mine", "safe", "angel", "perfect",
    "thunder", "poison", "believe", "alone", "again", "falling", "rescue", "trouble",
    "reason", "changes", "forget", "promises", "question", "enough", "forever", "never",
    "always", "waiting", "amazing", "broken", "remember", "somebody", "nothing",
    "everything", "anywhere", "stronger", "beautiful", "dangerous", "incredible",
    "delicate", "anyway", "anymore", "breathe", "stand", "hold", "down", "want", "need",
    "take", "come", "give", "move", "rise", "pray", "word", "talk", "walk", "rain", "dark",
    "blue", "ring", "hope", "born", "wild", "gone", "true", "good", "best", "last", "next",
    "only", "deep", "loud", "fast", "slow", "hard", "easy", "sure", "same", "back", "away",
    "over", "under", "inside", "outside", "together",
})

# Self-validation: prompt adjectives that precede the category noun
PROMPT_ADJECTIVES = frozenset({
    "home", "favorite", "fav", "go-to", "all-time", "top", "first", "best", "worst",
    "childhood", "guilty", "pleasure", "least", "most", "hated",
})

# Self-validation: function words end the category noun phrase
FUNCTION_WORDS = frozenset({
    "so", "and", "or", "but", "for", "from", "with", "the", "a", "an", "in", "on", "at",
    "to", "of", "is", "are", "was", "were", "be", "been", "being", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might", "shall",
    "can", "must", "that", "which", "who", "this", "these", "those", "my", "your", "his",
    "her", "its", "our", "their", "mine", "yours", "it", "they", "we", "he", "she", "me",
    "him", "us", "them", "i", "you", "not", "no", "if", "when", "where", "how", "what",
    "why", "because", "since", "although", "though", "while", "until", "after", "before",
    "during", "about", "into", "through",
})

# Self-validation: common words that are never open-ended answers
SELF_VALIDATION_STOPWORDS = frozenset({
    "here", "there", "what", "when", "where", "how", "why", "then", "now", "just", "also",
    "not", "too", "oh", "well", "so", "very", "really", "still", "even", "much", "many",
    "some", "any", "all", "both", "each", "every", "other", "another", "such", "more",
    "most", "less", "few", "only", "own", "same", "than", "like", "right", "good", "new",
    "old", "big", "long", "little", "great", "always", "never", "today", "yes", "no",
    "beautiful", "pretty", "amazing", "awesome", "gorgeous", "incredible", "lovely",
    "wonderful", "terrible", "horrible", "perfect", "cool", "nice", "fun", "wild", "love",
    "grew", "lived", "born", "moved", "spent", "miss", "remember", "weird", "funny",
    "mine", "ours", "lol", "nope", "yep", "yeah", "absolutely", "definitely", "literally",
    "basically", "obviously", "actually", "honestly", "seriously", "technically",
})

# Link-title metadata stripped before parsing "Artist - Song"
EMBED_PLATFORM_NAMES = ("youtube", "spotify", "apple music", "soundcloud", "bandcamp")

PLATFORM_HOSTS = (
    ("youtube", ("youtube.com", "youtu.be")),
    ("spotify", ("spotify.com",)),
    ("apple", ("music.apple.com", "itunes.apple.com")),
    ("soundcloud", ("soundcloud.com",)),
    ("bandcamp", ("bandcamp.com",)),
)
