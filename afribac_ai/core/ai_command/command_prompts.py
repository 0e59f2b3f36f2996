"""
AI command prompts.

Pure functions producing the PromptSpec for each step of the command
pipeline: tool classification, comment, generate and edit. Prompts are in
French, the working language of the platform.

Dependencies: afribac_ai.core.editor, afribac_ai.core.ai_command.prompt_builder
System role: Prompt templates for the editor assistant tools
"""

from collections.abc import Sequence

from afribac_ai.core.ai_command.prompt_builder import (
    OutputFormatting,
    PromptSpec,
    format_text_from_messages,
)
from afribac_ai.core.ai_command.tool_names import ToolName
from afribac_ai.core.editor import (
    SELECTION_OPEN,
    EditorSnapshot,
    get_markdown_with_block_ids,
    get_markdown_with_selection,
)
from afribac_ai.core.exceptions import EditSelectionRequiredError
from afribac_ai.models.chat import ChatMessage

CHOOSE_TOOL_TASK = (
    "Tu es un classifieur strict. Classe la dernière demande de l’utilisateur "
    "dans l’une des valeurs autorisées."
)

CHOOSE_TOOL_RULES = """\
- Par défaut : "generate". Toute question ouverte, demande d’idée ou demande de création → "generate".
- "edit" uniquement si l’utilisateur fournit du texte (ou une sélection) ET demande de le modifier, reformuler, traduire ou raccourcir.
- "comment" uniquement si l’utilisateur demande explicitement des commentaires, un avis, des annotations ou une relecture. Ne jamais l’inférer.
- Réponds par une seule valeur, sans guillemets ni explication."""

CHOOSE_TOOL_EXAMPLES = (
    'Utilisateur : « Rédige un paragraphe sur la photosynthèse » → Bien : "generate" | Mal : "edit"',
    'Utilisateur : « Écris un court poème sur le fleuve Niger » → Bien : "generate" | Mal : "comment"',
    'Utilisateur : « Corrige la grammaire. » → Bien : "edit" | Mal : "generate"',
    'Utilisateur : « Améliore le style. » → Bien : "edit" | Mal : "generate"',
    'Utilisateur : « Rends ce texte plus concis. » → Bien : "edit" | Mal : "generate"',
    'Utilisateur : « Traduis ce paragraphe en anglais. » → Bien : "edit" | Mal : "generate"',
    'Utilisateur : « Peux-tu relire ce texte et me donner un avis ? » → Bien : "comment" | Mal : "edit"',
    'Utilisateur : « Annote cette démonstration pour l’expliquer » → Bien : "comment" | Mal : "generate"',
)

COMMENT_TASK = """\
Tu es un assistant de relecture.
Tu reçois un document MDX découpé en blocs : <block id="...">contenu</block>.
<Selection> correspond au texte surligné par l’utilisateur.

Lis le contenu et produis des commentaires. Pour chaque commentaire, génère un objet JSON :
- blockId : l’id du bloc concerné ;
- content : l’extrait exact commenté ;
- comment : le commentaire, court, ou une explication.
Réponds uniquement par un tableau JSON de ces objets."""

COMMENT_RULES = """\
- IMPORTANT : si un commentaire couvre plusieurs blocs, utilise l’id du premier bloc.
- Le champ content est l’extrait original sans les balises <block>, balises MDX conservées.
- content peut couvrir un bloc entier, une partie d’un bloc ou plusieurs blocs ; plusieurs blocs sont séparés par une ligne vide (\\n\\n).
- Ne retourne pas systématiquement tout le bloc : choisis la plus petite portion pertinente.
- Il faut au moins un commentaire.
- Si une balise <Selection> existe, les commentaires portent sur la <Selection>. Une <Selection> longue appelle plusieurs commentaires."""

COMMENT_EXAMPLES = (
    """Utilisateur : Relis ce paragraphe.
backgroundData:
<block id="1">La photosynthèse transforme l’énergie lumineuse en énergie chimique.</block>
Sortie :
[{"blockId": "1", "content": "transforme l’énergie lumineuse en énergie chimique", "comment": "Précise où se déroule la réaction (chloroplastes)."}]""",
    """Utilisateur : Ajoute des commentaires sur ce passage.
backgroundData:
<block id="2">Les indépendances africaines débutent en 1957. Elles se font toutes sans conflit.</block>
Sortie :
[{"blockId": "2", "content": "Les indépendances africaines débutent en 1957.", "comment": "Cite l’exemple du Ghana pour appuyer la date."},
 {"blockId": "2", "content": "Elles se font toutes sans conflit.", "comment": "Affirmation inexacte : pense à l’Algérie ou au Cameroun."}]""",
    """Utilisateur : Fais une relecture.
backgroundData:
<block id="3">Une fonction dérivable est continue.</block>
<block id="4">La réciproque est fausse.</block>
Sortie :
[{"blockId": "3", "content": "Une fonction dérivable est continue.\\n\\nLa réciproque est fausse.", "comment": "Ajoute un contre-exemple, par exemple la valeur absolue en 0."}]""",
    """Utilisateur : Donne un avis sur l’expression surlignée.
backgroundData:
<block id="5">L’énergie solaire est <Selection>infiniment disponible</Selection> au Sahel.</block>
Sortie :
[{"blockId": "5", "content": "infiniment disponible", "comment": "Formulation trop forte : préfère « abondante »."}]""",
)

GENERATE_TASK = """\
Tu es un assistant de génération de contenu pour des élèves de terminale.
Génère du contenu selon la consigne de l’utilisateur en t’appuyant sur le contexte fourni (backgroundData).
Pour une création ou une transformation (résumer, traduire, réécrire, faire un tableau...), produis directement le résultat final à partir de backgroundData.
Ne demande pas de contenu supplémentaire."""

GENERATE_RULES = """\
- <Selection> correspond au texte surligné par l’utilisateur.
- backgroundData représente le contexte Markdown actuel.
- N’utilise que backgroundData et <Selection> ; ne demande jamais plus de données.
- CRITIQUE : ne supprime ni ne modifie les balises MDX personnalisées (<u>, <callout>, <kbd>, <toc>, <sub>, <sup>, <mark>, <del>, <date>, <span>, <column>, <column_group>, <file>, <audio>, <video>) sauf demande explicite.
- CRITIQUE : n’entoure pas la sortie de blocs de code.
- Préserve l’indentation et les retours à la ligne des mises en page structurées (colonnes, tableaux)."""

GENERATE_EXAMPLES = (
    """Utilisateur : Résume le texte suivant.
backgroundData: Le théorème de Pythagore relie les longueurs des côtés d’un triangle rectangle : le carré de l’hypoténuse est égal à la somme des carrés des deux autres côtés.
Sortie :
Dans un triangle rectangle, le carré de l’hypoténuse vaut la somme des carrés des deux autres côtés.""",
    """Utilisateur : Donne trois points clés à retenir.
backgroundData: La révision régulière, le sommeil et les annales corrigées sont les clés de la réussite au bac.
Sortie :
- Réviser régulièrement.
- Dormir suffisamment.
- S’entraîner sur des annales corrigées.""",
    """Utilisateur : Crée un tableau récapitulatif.
backgroundData:
Session 2022 : 1200 candidats
Session 2023 : 1500 candidats
Sortie :
| Session | Candidats |
|---------|-----------|
| 2022    | 1200      |
| 2023    | 1500      |""",
    """Utilisateur : Explique l’expression sélectionnée.
backgroundData: En économie, la <Selection>balance commerciale</Selection> d’un pays peut être déficitaire.
Sortie :
La balance commerciale compare la valeur des exportations et des importations de biens d’un pays.""",
)

EDIT_BLOCKS_TASK = """\
Le <backgroundData> suivant est un contenu Markdown fourni par l’utilisateur. Modifie-le selon sa consigne.
Sauf indication contraire, la sortie doit pouvoir remplacer l’original sans rupture."""

EDIT_BLOCKS_RULES = """\
- N’écris pas les balises <backgroundData> dans ta réponse.
- <backgroundData> contient tous les blocs sélectionnés que l’utilisateur veut modifier.
- Ta réponse remplace directement l’intégralité de <backgroundData>.
- Conserve la structure et le format, sauf demande explicite.
- CRITIQUE : fournis uniquement le contenu de remplacement. N’ajoute ni ne retire de blocs et ne change pas leur structure sauf demande explicite."""

EDIT_BLOCKS_EXAMPLES = (
    """Utilisateur : Corrige la grammaire.
backgroundData: # Chapitre 1
Les élève doit réviser les suites numérique.
Sortie :
# Chapitre 1
Les élèves doivent réviser les suites numériques.""",
    """Utilisateur : Adopte un ton plus formel.
backgroundData: ## Intro
Salut, on va voir vite fait les intégrales.
Sortie :
## Introduction
Cette section présente les notions fondamentales du calcul intégral.""",
)

EDIT_SELECTION_TASK = """\
Le backgroundData suivant contient une balise <Selection> qui marque la partie modifiable.
Modifie uniquement le texte dans <Selection>.
Ta sortie remplace directement la sélection, sans balises ni texte autour, et doit s’intégrer naturellement au texte d’origine."""

EDIT_SELECTION_RULES = """\
- <Selection> contient le segment modifiable.
- Ta réponse sera concaténée à prefilledResponse : le résultat doit rester fluide et cohérent.
- Ne modifie que le contenu de <Selection>, sans contexte externe.
- La sortie doit pouvoir remplacer directement <Selection>.
- N’inclus ni les balises <Selection> ni le texte qui l’entoure.
- La formulation doit être correcte et naturelle.
- Si l’entrée est invalide ou non améliorable, renvoie-la inchangée."""

EDIT_SELECTION_EXAMPLES = (
    "Utilisateur : Améliore le choix des mots.\nbackgroundData: C’est un <Selection>bon</Selection> résultat.\nSortie : excellent",
    "Utilisateur : Corrige la grammaire.\nbackgroundData: Les élèves <Selection>révise</Selection> chaque soir.\nSortie : révisent",
    "Utilisateur : Rends le ton plus poli.\nbackgroundData: <Selection>Donne-moi</Selection> le corrigé.\nSortie : Pourrais-tu me donner",
    "Utilisateur : Traduis en anglais.\nbackgroundData: <Selection>Bonjour</Selection>\nSortie : Hello",
)


def get_choose_tool_prompt(
    messages: Sequence[ChatMessage],
    allowed: Sequence[ToolName],
) -> PromptSpec:
    """
    Build the tool classification prompt.

    Args:
        messages: Chat history
        allowed: Tools the answer may name

    Returns:
        PromptSpec: Classification prompt
    """
    values = ", ".join(f'"{tool.value}"' for tool in allowed)
    return PromptSpec(
        task=CHOOSE_TOOL_TASK,
        rules=f"- Valeurs autorisées : {values}.\n{CHOOSE_TOOL_RULES}",
        examples=CHOOSE_TOOL_EXAMPLES,
        history=format_text_from_messages(messages),
    )


def get_comment_prompt(snapshot: EditorSnapshot, messages: Sequence[ChatMessage]) -> PromptSpec:
    """Build the review prompt over the block-annotated document."""
    return PromptSpec(
        task=COMMENT_TASK,
        rules=COMMENT_RULES,
        examples=COMMENT_EXAMPLES,
        history=format_text_from_messages(messages),
        background_data=get_markdown_with_block_ids(snapshot),
    )


def get_generate_prompt(snapshot: EditorSnapshot, messages: Sequence[ChatMessage]) -> PromptSpec:
    """
    Build the generation prompt.

    Unless the selection already spans several blocks, the cursor block is
    selected first so the background data carries a ``<Selection>`` anchor.
    """
    if not snapshot.is_multi_blocks():
        snapshot = snapshot.add_selection()

    return PromptSpec(
        task=GENERATE_TASK,
        rules=GENERATE_RULES,
        examples=GENERATE_EXAMPLES,
        history=format_text_from_messages(messages),
        background_data=get_markdown_with_selection(snapshot),
    )


def get_edit_prompt(
    snapshot: EditorSnapshot,
    messages: Sequence[ChatMessage],
    is_selecting: bool,
) -> PromptSpec:
    """
    Build the edit prompt.

    Args:
        snapshot: Editor state
        messages: Chat history
        is_selecting: Whether a range is selected

    Returns:
        PromptSpec: Whole-span replacement prompt for multi-block
        selections, selection-only replacement prompt otherwise

    Raises:
        EditSelectionRequiredError: If nothing is selected
    """
    if not is_selecting:
        raise EditSelectionRequiredError()

    history = format_text_from_messages(messages)

    if snapshot.is_multi_blocks():
        return PromptSpec(
            task=EDIT_BLOCKS_TASK,
            rules=EDIT_BLOCKS_RULES,
            examples=EDIT_BLOCKS_EXAMPLES,
            history=history,
            background_data=get_markdown_with_selection(snapshot),
            output_formatting=OutputFormatting.MARKDOWN,
        )

    snapshot = snapshot.add_selection()
    markdown = get_markdown_with_selection(snapshot)
    marker = markdown.find(SELECTION_OPEN)
    prefilled_response = markdown[:marker] if marker >= 0 else ""

    return PromptSpec(
        task=EDIT_SELECTION_TASK,
        rules=EDIT_SELECTION_RULES,
        examples=EDIT_SELECTION_EXAMPLES,
        history=history,
        background_data=markdown,
        output_formatting=OutputFormatting.MARKDOWN,
        prefilled_response=prefilled_response,
    )


def get_tool_prompt(
    tool: ToolName,
    snapshot: EditorSnapshot,
    messages: Sequence[ChatMessage],
) -> PromptSpec:
    """Dispatch to the prompt function of ``tool``."""
    if tool is ToolName.COMMENT:
        return get_comment_prompt(snapshot, messages)
    if tool is ToolName.GENERATE:
        return get_generate_prompt(snapshot, messages)
    if tool is ToolName.EDIT:
        return get_edit_prompt(snapshot, messages, is_selecting=snapshot.is_expanded())
    raise ValueError(f"Unsupported tool: {tool!r}")
