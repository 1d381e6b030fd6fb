# prompts.py
REFLECTION_QUESTIONS = [
    "🤔 Have you tried searching for this problem yet?",
    "📚 Is there documentation you could check first?",
    "🔍 Can you break the problem into smaller, simpler parts?",
    "💡 Is there another way to approach this?",
    "🧠 How long have you actually thought about this on your own?",
    "📝 Can you write down what you already know about the problem?",
    "🔨 Could you try a different experiment before asking?",
    "👥 Is there someone on your team who could help?",
]

REFLECTION_INTRO = """
That's a long question! Writing this much usually means you already understand
the problem well enough to work through it yourself.

Steps to try before asking the assistant:
- Search the web, Stack Overflow or the official docs, using the exact error text.
- Read the official documentation of the framework or library; it usually has examples.
- Build the smallest version that reproduces the problem and debug it step by step.
""".strip()


# ---------- Simulated assistant replies ----------
# {prompt} is replaced with the user's question.

REPLY_TEMPLATES = [
    """
I see you're looking into "{prompt}". Before I answer, try thinking it through yourself! You could:

• Look it up in a few trustworthy sources
• Analyse the problem from different angles
• Talk it over with a friend or a colleague
• Write down your own reasoning first

Working it out yourself helps you understand it more deeply and remember it longer!
""".strip(),
    """
Good question about "{prompt}". Here's a nudge instead of an answer:

• What is the smallest piece of this you already know how to do?
• Which part are you actually stuck on?
• What would you try if no assistant were available?

Give it ten more minutes on your own. You might surprise yourself.
""".strip(),
    """
"{prompt}" is worth solving yourself. Try this order:

• Re-read the problem and restate it in one sentence
• Sketch two or three possible approaches
• Pick the simplest and test it

Come back if you're still stuck after that.
""".strip(),
]

FALLBACK_REPLY = (
    "Let's focus on one small step you can take on your own right now, "
    "then come back if you still need help."
)


# ---------- Daily challenge ----------

DAILY_TIPS = [
    "🔍 Search in English with precise keywords to get better results",
    "📚 Read the official documentation before asking AI",
    "🤔 Break the problem into small parts before looking for a solution",
    "💡 Brainstorm 3 different solutions before choosing one",
    "🔨 Try implementing a simple version first",
    "📝 Write down what you already know about the problem",
    "🎯 Define exactly what end result you want",
    "🧩 Split a complex problem into basic steps",
    "🔄 Look through your old code for a similar pattern",
    "🗣️ Explain the problem out loud to someone else (rubber duck debugging)",
]


# ---------- Admission messages ----------

LIMIT_EXCEEDED_MESSAGE = (
    "You've used all {daily_limit} questions for today! "
    "This is a great chance to build your own problem-solving skills. "
    "Your uses reset at midnight."
)

COOLDOWN_MESSAGE = (
    "Please wait {seconds} more second(s) before asking again. "
    "Use the pause to think a little deeper about your question."
)
