import os

# Translation namespace for model errors and attribute names
# (`<I18N_SCOPE>.errors.models...`, `<I18N_SCOPE>.attributes...`)
I18N_SCOPE = os.getenv("I18N_SCOPE", "fast_app")

# App segment of global ids: gid://<GLOBAL_ID_APP>/Model/id
GLOBAL_ID_APP = os.getenv("GLOBAL_ID_APP", "fast-app")

LOCALE_DEFAULT = os.getenv("LOCALE_DEFAULT", "en")
LOCALE_FALLBACK = os.getenv("LOCALE_FALLBACK", "en")
LOCALE_PATH = os.getenv("LOCALE_PATH", os.path.join(os.getcwd(), "lang"))
