"""
Convivio - Prompt templates.

Italian prompt text. Templates use str.format placeholders; the JSON shape
blocks are kept separate (they are full of braces) and appended verbatim.
"""

# =============================================================================
# Full menu
# =============================================================================

MENU_SYSTEM = """Sei un sommelier professionista, chef consulente e maestro di cerimonie italiano. Genera un menu completo con ricette dettagliate, abbinamenti vino e consigli di galateo per inviti e ricevimento.

⚠️ REGOLA PRIORITARIA - LEGGERE ATTENTAMENTE:
Le "Note specifiche dell'utente" hanno MASSIMA PRIORITÀ ASSOLUTA.
- Se l'utente specifica il NUMERO di piatti per portata (es. "10 antipasti", "1 primo", "5 dolci"), DEVI generare ESATTAMENTE quel numero di piatti
- Se l'utente specifica ingredienti, tema, stile, o qualsiasi altra indicazione, DEVI seguirla alla lettera
- Le note prevalgono su stagione, tipo di dieta e regole predefinite
- NON ignorare MAI le richieste dell'utente

REGOLE ABBINAMENTO VINI:
- Privilegia SEMPRE i vini presenti nella cantina fornita
- Se la cantina è vuota, TUTTI gli abbinamenti devono avere provenienza "suggerimento"
- Suggerisci vini esterni solo se la cantina non copre adeguatamente
- Progressione coerente: bollicine → bianchi → rossi leggeri → rossi strutturati → dolci
- Per ogni vino da cantina, verifica che la quantità sia sufficiente (1 bottiglia ogni 3-4 persone)
- Per i suggerimenti di acquisto, indica SEMPRE produttore e annata consigliata
- Valuta la compatibilità di ogni vino con le preferenze gusto dell'utente
- Il campo "portata" di ogni abbinamento deve nominare una portata presente nel menu

REGOLE RICETTE:
- Ogni piatto deve avere una ricetta completa con ingredienti, quantità, tempi e procedimento
- Le quantità degli ingredienti devono essere calibrate per il numero di persone
- Indica tempo di preparazione e cottura separatamente
- Il procedimento deve essere chiaro, passo per passo

REGOLE GALATEO:
- Fornisci consigli su tempistica e formulazione degli inviti
- Descrivi il protocollo di accoglienza e ricevimento
- Indica la corretta disposizione della tavola
- Suggerisci argomenti di conversazione appropriati all'occasione

Rispondi SOLO con JSON valido (nessun markdown, nessun testo prima o dopo)."""

MENU_USER = """DETTAGLI CONVIVIO:
- Titolo: {title}
- Data: {date}
- Stagione: {season}
- Persone: {person_count}
- Occasione: {occasion}
- Vincoli dietetici: {diet}
- Tipo cucina: {cuisine}

{notes_marker}
{notes}

PREFERENZE GUSTO OSPITE:
{taste}

CANTINA DISPONIBILE:
{inventory}

Segui ESATTAMENTE questo schema:
"""

NOTES_MARKER = "📋 NOTE SPECIFICHE DELL'UTENTE (PRIORITÀ MASSIMA):"
NO_NOTES = "nessuna"
DEFAULT_OCCASION = "Convivio informale"

RECIPE_SCHEMA = """{
  "nome": "string",
  "descrizione": "string",
  "porzioni": number,
  "ricetta": {
    "ingredienti": [{"nome": "string", "quantita": "string", "unita": "string o null"}],
    "tempo_preparazione": number,
    "tempo_cottura": number,
    "difficolta": "facile|media|difficile",
    "procedimento": ["step 1", "step 2", ...],
    "consigli": "string o null"
  }
}"""

COMPATIBILITY_SCHEMA = """{
    "punteggio": number (1-100),
    "motivazione": "string",
    "punti_forza": ["string"],
    "punti_deboli": ["string"]
  }"""

PAIRED_WINE_SCHEMA = """{
  "nome": "string",
  "produttore": "string",
  "annata": "string o null",
  "provenienza": "cantina" oppure "suggerimento",
  "quantita_necessaria": number,
  "motivazione": "string",
  "compatibilita": """ + COMPATIBILITY_SCHEMA + """
}"""

SUGGESTION_SCHEMA = """{
  "vino": "string",
  "produttore": "string",
  "annata": "string o null",
  "perche": "string",
  "abbinamento_ideale": "string",
  "compatibilita": """ + COMPATIBILITY_SCHEMA + """
}"""

MENU_SCHEMA = """{
  "menu": {
    "antipasti": [<piatto>],
    "primi": [<piatto>],
    "secondi": [<piatto>],
    "contorni": [<piatto>],
    "dolci": [<piatto>]
  },
  "abbinamenti": [
    {"portata": "antipasti|primi|secondi|contorni|dolci", "vino": <vino>}
  ],
  "suggerimenti_acquisto": [<suggerimento>],
  "note_servizio": "string con consigli su temperatura vini, decantazione, ordine di servizio",
  "galateo": {
    "inviti": {
      "tempistica": "quando inviare gli inviti",
      "formulazione": "come formulare l'invito",
      "conferma": "come gestire le conferme",
      "consigli": ["consiglio 1", "consiglio 2"]
    },
    "ricevimento": {
      "accoglienza": "come accogliere gli ospiti",
      "aperitivo": "gestione momento aperitivo",
      "passaggio_tavola": "come invitare a tavola",
      "congedo": "come congedare gli ospiti",
      "consigli": ["consiglio 1", "consiglio 2"]
    },
    "tavola": {
      "disposizione": "come disporre tavola e posti",
      "servizio": "ordine e modalità di servizio",
      "conversazione": "argomenti consigliati per l'occasione",
      "consigli": ["consiglio 1", "consiglio 2"]
    }
  }
}

dove <piatto> è:
""" + RECIPE_SCHEMA + """

<vino> è:
""" + PAIRED_WINE_SCHEMA + """

<suggerimento> è:
""" + SUGGESTION_SCHEMA


# =============================================================================
# Single dish
# =============================================================================

DISH_SYSTEM = """Sei un sommelier professionista e chef consulente italiano.
Generi UN SOLO piatto alternativo che sostituisce un piatto di un menu esistente.
Rispondi SOLO con JSON valido per un singolo piatto."""

DISH_USER = """Devi generare UN SOLO piatto alternativo per sostituire "{dish_name}" nella portata {course}.

CONTESTO DELLA CENA:
{dinner_context}

MENU ATTUALE COMPLETO (per coerenza di stile):
{menu_context}

ALTRI PIATTI NELLA STESSA PORTATA:
{other_dishes}

VINI ABBINATI ALLA PORTATA:
{course_wines}

CANTINA DISPONIBILE:
{inventory}

IMPORTANTE:
- Il nuovo piatto deve essere DIVERSO da "{dish_name}"
- Deve essere coerente con il tipo di cucina ({cuisine}) e lo stile del menu esistente
- Deve rispettare le restrizioni dietetiche ({diet})
- Deve abbinarsi bene con i vini già selezionati
- Mantieni lo stesso livello di raffinatezza del menu esistente

Schema:
"""


# =============================================================================
# Single wine
# =============================================================================

WINE_SYSTEM = """Sei un sommelier professionista italiano.
Proponi UN SOLO vino alternativo che sostituisce un vino di un menu esistente.
Rispondi SOLO con JSON valido per un singolo vino."""

CELLAR_WINE_USER = """Devi proporre UN SOLO vino DALLA CANTINA per sostituire "{wine_name}" abbinato alla portata {course}.

CONTESTO DELLA CENA:
{dinner_context}

PIATTI DELLA PORTATA:
{course_dishes}

ALTRI VINI GIÀ NEL MENU:
{other_wines}

CANTINA DISPONIBILE:
{inventory}

IMPORTANTE:
- Il nuovo vino deve essere DIVERSO da "{wine_name}"
- Scegli SOLO tra i vini elencati in CANTINA DISPONIBILE, con nome e produttore esatti
- Se la cantina non offre un'alternativa adeguata, proponi un vino da acquistare con provenienza "suggerimento"
- Indica la quantità di bottiglie necessaria per {person_count} persone
- Valuta la compatibilità con le preferenze gusto dell'ospite

Schema:
"""

PURCHASE_PAIRING_USER = """Devi proporre UN SOLO vino DA ACQUISTARE per sostituire "{wine_name}" abbinato alla portata {course}.

CONTESTO DELLA CENA:
{dinner_context}

PIATTI DELLA PORTATA:
{course_dishes}

ALTRI VINI GIÀ NEL MENU:
{other_wines}

IMPORTANTE:
- Il nuovo vino deve essere DIVERSO da "{wine_name}"
- Il vino va acquistato: il campo "provenienza" deve essere "suggerimento"
- Indica SEMPRE produttore e annata consigliata
- Indica la quantità di bottiglie necessaria per {person_count} persone
- Valuta la compatibilità con le preferenze gusto dell'ospite

Schema:
"""

PURCHASE_WINE_USER = """Devi suggerire UN SOLO vino DA ACQUISTARE per sostituire "{wine_name}" (abbinamento ideale: {ideal_pairing}).

CONTESTO DELLA CENA:
{dinner_context}

MENU ATTUALE COMPLETO:
{menu_context}

ALTRI VINI GIÀ NEL MENU:
{other_wines}

IMPORTANTE:
- Il nuovo vino deve essere DIVERSO da "{wine_name}"
- Indica SEMPRE produttore e annata consigliata
- Valuta la compatibilità con le preferenze gusto dell'ospite

Schema:
"""


# =============================================================================
# Invite
# =============================================================================

INVITE_SYSTEM = """Scrivi messaggi di invito a cena in italiano.
Rispondi SOLO con il testo del messaggio, nient'altro."""

INVITE_USER = """Genera un messaggio di invito per questa cena.

DETTAGLI CENA:
- Data: {date}
- Ora: {time}
- Occasione: {occasion}
{notes_line}
{menu_preview}
STILE RICHIESTO: {tone}

REQUISITI OBBLIGATORI:
- NON includere nomi di persone (né mittente né destinatario)
- NON includere firma finale
- NON elencare i nomi dei piatti del menu
- Se c'è un menu, puoi solo accennare genericamente al tipo di cucina
- Includi data e ora
- Chiedi conferma di partecipazione
- Lunghezza: 2-4 frasi
- NON usare emoji o formattazione markdown"""

DEFAULT_INVITE_OCCASION = "Cena informale"

TONE_FORMAL = "Tono formale ed elegante, linguaggio ricercato"
TONE_SEMI_FORMAL = "Tono semi-formale, cordiale ma curato"
TONE_BUSINESS = "Tono professionale ma cordiale"
TONE_INFORMAL = "Tono informale e amichevole, come tra amici"

# First match wins, in this order.
TONE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    (
        TONE_FORMAL,
        ("matrimonio", "anniversario", "laurea", "battesimo", "comunione", "cresima", "gala", "formale"),
    ),
    (TONE_SEMI_FORMAL, ("compleanno", "promozione", "pensionamento", "fidanzamento")),
    (TONE_BUSINESS, ("lavoro", "business", "colleghi", "aziendale")),
]


# =============================================================================
# Dinner notes
# =============================================================================

NOTE_KITCHEN_SYSTEM = """Sei uno chef che prepara note operative per cuochi casalinghi.

Regole:
- Dosi esatte per numero ospiti indicato
- Tempi precisi per ogni fase
- Ingredienti facilmente reperibili
- Suggerisci sostituzioni locali se un ingrediente è difficile da trovare
- Consigli di impiattamento con descrizione visiva
- Rispetta SEMPRE le restrizioni alimentari indicate

Rispondi SOLO con JSON valido (nessun markdown, nessun testo prima o dopo)."""

NOTE_KITCHEN_USER = """Genera note ricette operative.

CENA
- Data e ora: {date_time}
- Ospiti: {guest_count}
- Tipo cucina: {cuisine}
- Restrizioni alimentari: {diet}
- Note: {notes}

MENU
{menu}

Segui ESATTAMENTE questo schema:
"""

NOTE_KITCHEN_SCHEMA = """{
  "timeline_cucina": [
    {"quando_minuti": -1440, "quando_label": "1 giorno prima", "descrizione": "...", "piatto_correlato": "Nome piatto o null"}
  ],
  "ricette": [
    {
      "nome": "Nome piatto",
      "categoria": "Antipasti|Primi|Secondi|Contorni|Dolci",
      "difficolta": "facile|media|difficile",
      "tempo_preparazione": 30,
      "tempo_cottura": 20,
      "preparabile_anticipo": true,
      "ingredienti": [{"nome": "...", "quantita": "100", "unita": "g"}],
      "procedimento": ["Step 1", "Step 2"],
      "impiattamento": {"descrizione": "...", "consigli": ["..."]},
      "consigli": "..."
    }
  ],
  "lista_spesa": [
    {"categoria": "Verdure", "items": [{"nome": "Pomodori", "quantita": "500g"}]}
  ],
  "consigli_chef": ["Consiglio 1", "Consiglio 2"]
}"""

NOTE_WINE_SYSTEM = """Sei un sommelier che prepara note di servizio.

Regole:
- Temperature di servizio precise
- Tempistiche di gestione (frigo, apertura, decantazione)
- Bicchieri appropriati
- Sequenza di servizio ottimale
- Presenta ogni vino agli ospiti in modo semplice

Rispondi SOLO con JSON valido (nessun markdown, nessun testo prima o dopo)."""

NOTE_WINE_USER = """Genera note servizio vini.

CENA
- Data e ora: {date_time}
- Ospiti: {guest_count}

MENU RIEPILOGO
{menu}

VINI CONFERMATI
{wines}

Segui ESATTAMENTE questo schema:
"""

NOTE_WINE_SCHEMA = """{
  "timeline_vini": [
    {"quando_minuti": -120, "quando_label": "2 ore prima", "vino": "Nome vino", "azione": "Mettere in frigo", "icona": "❄️"}
  ],
  "schede_vino": [
    {
      "nome_vino": "Nome",
      "produttore": "Produttore",
      "portata_abbinata": "Antipasti",
      "temperatura_servizio": "8-10°C",
      "bicchiere_consigliato": "Calice da bianco",
      "quantita_persona": "1 bicchiere (150ml)",
      "decantazione": {"necessaria": false, "tempo": null, "motivo": null},
      "come_presentare": "Come presentare il vino agli ospiti"
    }
  ],
  "sequenza_servizio": [
    {"ordine": 1, "vino": "Nome", "momento": "Con antipasti", "transizione": "Come passare al prossimo"}
  ],
  "attrezzatura_necessaria": [
    {"nome": "Secchiello ghiaccio", "icona": "🧊", "quantita": 1}
  ],
  "consigli_sommelier": ["Consiglio 1", "Consiglio 2"]
}"""

NOTE_HOSTING_SYSTEM = """Sei un esperto di ospitalità. Prepari note per gestire una cena memorabile.

Regole:
- Apparecchiatura secondo la tradizione italiana
- Accoglienza adatta all'occasione
- Gestione dei tempi e della conversazione
- Post-cena con le usanze locali (caffè, digestivo, tè)

Rispondi SOLO con JSON valido (nessun markdown, nessun testo prima o dopo)."""

NOTE_HOSTING_USER = """Genera note accoglienza e gestione serata.

CENA
- Data e ora: {date_time}
- Ospiti: {guest_count}
- Tipo cucina: {cuisine}
- Occasione: {occasion}
- Restrizioni: {diet}
- Note: {notes}

MENU RIEPILOGO
{menu}

Segui ESATTAMENTE questo schema:
"""

NOTE_HOSTING_SCHEMA = """{
  "preparazione_ambiente": {
    "tavola": {
      "descrizione": "Descrizione generale della tavola",
      "tovaglia": "Tipo tovaglia",
      "tovaglioli": "Tipo e disposizione",
      "bicchieri": "Quali bicchieri",
      "centrotavola": "Suggerimento",
      "segnaposto": "Se appropriato"
    },
    "atmosfera": {
      "illuminazione": "Suggerimento",
      "musica": "Genere consigliato",
      "profumo": "Se appropriato",
      "temperatura": "Ideale"
    },
    "checklist_pre_ospiti": ["Cosa controllare 1", "Cosa controllare 2"]
  },
  "accoglienza": {
    "orario_arrivo": "Quando aspettarsi gli ospiti",
    "dove_ricevere": "Ingresso, salotto, ecc.",
    "aperitivo": {"cosa": "Cosa offrire", "dove": "Dove servirlo", "durata": "Quanto tempo"},
    "come_accomodare": "Come guidare a tavola",
    "rompighiaccio": ["Argomento 1", "Argomento 2"]
  },
  "gestione_serata": {
    "tempi_portate": "Indicazioni sui tempi",
    "quando_sparecchiare": "Quando e come",
    "consigli_conversazione": ["Argomento 1", "Argomento 2"],
    "se_qualcosa_va_storto": ["Soluzione 1", "Soluzione 2"]
  },
  "post_cena": {
    "caffe_te": {"quando": "Quando offrire", "come": "Come servire"},
    "digestivo": {"cosa": "Cosa offrire", "quando": "Quando"},
    "intrattenimento": "Eventuale attività",
    "congedo": {"segnali": "Come capire quando", "saluti": "Come salutare", "omaggio": "Se appropriato"}
  },
  "consigli_host": ["Consiglio finale 1", "Consiglio finale 2"]
}"""

NO_MENU = "Menu non disponibile"
NO_CONFIRMED_WINES = "Nessun vino confermato"
DEFAULT_HOSTING_OCCASION = "Cena informale"


# =============================================================================
# Backend proposal
# =============================================================================

PROPOSAL_SYSTEM = """Sei un esperto chef e sommelier italiano. Devi proporre un menu completo con abbinamenti vino per una cena.
Rispondi SOLO con il JSON, senza altro testo."""

PROPOSAL_USER = """CONTESTO CENA:
- Nome: {dinner_name}
- Data: {dinner_date}
- Stagione: {season}
- Stile: {dinner_style}
- Tempo di preparazione disponibile: {cooking_time}
- Budget vini: {budget_level}
{user_notes}

OSPITI ({guest_count} persone):
{guest_summary}

VINI DISPONIBILI IN CANTINA:
{inventory_summary}

ISTRUZIONI PRIORITARIE:
⚠️ MASSIMA PRIORITÀ: Le "RICHIESTE SPECIFICHE DELL'UTENTE" DEVONO essere seguite ESATTAMENTE.
   - Se l'utente specifica il numero di piatti per portata (es. "10 antipasti, 1 primo"), genera ESATTAMENTE quel numero
   - Se l'utente specifica il tipo di cucina, tema, o ingredienti, seguili alla lettera
   - NON ignorare MAI le richieste dell'utente

ISTRUZIONI GENERALI (se non specificate dall'utente):
1. Se non ci sono richieste specifiche, proponi: 1 antipasto, 1 primo, 1 secondo, 1 dolce
2. Considera TUTTE le restrizioni alimentari - nessun piatto deve contenere ingredienti vietati
3. Adatta la complessità al tempo di preparazione disponibile
4. Per ogni piatto indica nome, breve descrizione, flag dietetici (GF, LF, V, VG) e tempo di preparazione
5. ABBINAMENTI VINO:
   - Ogni piatto DEVE avere un vino abbinato
   - MINIMIZZA il numero di vini diversi
   - "cellarWine": un vino dalla lista "DISPONIBILI IN CANTINA" (se disponibile)
   - "marketWine": un vino da acquistare come alternativa
   - Se lo stesso vino va bene per più portate, usa lo stesso nome esatto
6. Lo stile del menu deve rispecchiare il tipo di cena (informale/conviviale/elegante)

TIPI DI PORTATA:
- "starter" = antipasto
- "first" = primo (pasta, risotto, zuppe)
- "main" = secondo (carne, pesce)
- "side" = contorno
- "dessert" = dolce

FORMATO OUTPUT (JSON):
"""

PROPOSAL_SCHEMA = """{
  "menu": {
    "courses": [
      {
        "course": "starter|first|main|side|dessert",
        "name": "Nome piatto",
        "description": "Descrizione",
        "dietaryFlags": ["GF", "LF", "V"],
        "prepTime": 30,
        "cellarWine": {"name": "Nome esatto del vino dalla cantina", "reasoning": "Perché questo abbinamento"},
        "marketWine": {"name": "Nome vino da acquistare", "details": "Tipo, regione, produttore consigliato", "reasoning": "Perché questo abbinamento"}
      }
    ],
    "reasoning": "Spiegazione generale delle scelte di menu e vini",
    "wineStrategy": "Strategia abbinamenti",
    "seasonContext": "Come la stagione ha influenzato le scelte",
    "guestConsiderations": ["Considerazione 1"],
    "totalPrepTime": 120
  }
}

IMPORTANTE: Se l'utente chiede N piatti di un tipo, l'array "courses" DEVE contenere esattamente N elementi con quel course type."""

NO_GUESTS = "Nessun ospite registrato"
NO_CELLAR_WINES = "Nessun vino in cantina"
