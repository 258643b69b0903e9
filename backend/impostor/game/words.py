from __future__ import annotations

import random

from .models import WordEntry


# (word, hint, extra hint). The impostor sees the first hint from round 1 and
# both hints from round 2 onward.
DEFAULT_WORDS_DE: list[tuple[str, str, str]] = [
    ("Pizza", "Triangel", "Neapel"),
    ("Katze", "Neun Leben", "Schnurrhaare"),
    ("Auto", "Benzinpreis", "Vier Räder"),
    ("Baum", "Ringe zählen", "Wurzelwerk"),
    ("Strand", "Muscheln sammeln", "Sandburg"),
    ("Buch", "Eselsohren", "Kapitel"),
    ("Kaffee", "Bohnenland", "Wachmacher"),
    ("Musik", "Sieben Noten", "Ohrwurm"),
    ("Schule", "Pausenhof", "Zeugnis"),
    ("Computer", "Binärcode", "Tastatur"),
    ("Telefon", "Klingelton", "Hörer"),
    ("Sonne", "Vitamin D", "Sonnenbrand"),
    ("Regen", "Tropfenform", "Pfütze"),
    ("Haus", "Dachziegel", "Hausnummer"),
    ("Garten", "Gnome", "Gießkanne"),
    ("Film", "24 Frames", "Popcorn"),
    ("Sport", "Fairplay", "Trikot"),
    ("Urlaub", "Souvenirs", "Koffer packen"),
    ("Familie", "Stammbaum", "Sonntagsessen"),
    ("Freunde", "Vertrauen", "Pferde stehlen"),
    ("Arbeit", "Montag Blues", "Feierabend"),
    ("Spiel", "Regelheft", "Würfel"),
    ("Schlaf", "Traumfänger", "Schäfchen zählen"),
    ("Zeit", "Ticktack", "Sanduhr"),
    ("Geld", "Papierscheine", "Sparbuch"),
    ("Liebe", "Pfeil und Bogen", "Schmetterlinge"),
    ("Glück", "Zahl Dreizehn", "Kleeblatt"),
    ("Traum", "Sandmann", "REM-Phase"),
    ("Farbe", "Regenbogen", "Pinsel"),
    ("Licht", "Geschwindigkeit", "Schalter"),
    ("Fenster", "Glasscheibe", "Fensterbank"),
    ("Tür", "Klinkenputzer", "Schwelle"),
    ("Stuhl", "Vier Beine", "Lehne"),
    ("Tisch", "Tischdecke", "Platte"),
    ("Bett", "Kopfkissen", "Matratze"),
    ("Küche", "Küchengeruch", "Herdplatte"),
    ("Bad", "Spiegel beschlagen", "Fliesen"),
    ("Wasser", "H2O", "Durst"),
    ("Feuer", "Prometheus", "Streichholz"),
    ("Luft", "Sauerstoff", "Atemzug"),
    ("Erde", "Blauer Planet", "Humus"),
    ("Himmel", "Wolkenkratzer", "Horizont"),
    ("Stern", "Lichtjahre", "Sternschnuppe"),
    ("Mond", "Neil Armstrong", "Vollmond"),
    ("Blume", "Bienenstich", "Blütenblatt"),
    ("Gras", "Rasensprenger", "Halm"),
    ("Vogel", "Federleicht", "Nest"),
    ("Fisch", "Wasser atmen", "Kiemen"),
    ("Hund", "Bester Freund", "Gassi gehen"),
    ("Maus", "Computertier", "Käsefalle"),
    ("Pferd", "Trojanisch", "Hufeisen"),
    ("Kuh", "Milchstraße", "Weide"),
    ("Schwein", "Sparschwein", "Suhle"),
    ("Huhn", "Oder Ei zuerst", "Hühnerstall"),
    ("Apfel", "Newton", "Kerngehäuse"),
    ("Banane", "Kalium", "Schale"),
    ("Orange", "Farbname", "Zitrusfrucht"),
    ("Brot", "Täglich geben", "Kruste"),
    ("Käse", "Löcher haben", "Fondue"),
    ("Milch", "Weiße Flüssigkeit", "Kalzium"),
    ("Zucker", "Süße Würfel", "Rübe"),
    ("Salz", "Weißes Gold", "Meerwasser"),
    ("Pfeffer", "Niesreiz", "Mühle"),
    ("Schokolade", "Azteken", "Tafel"),
    ("Kuchen", "Geburtstag", "Backofen"),
    ("Eis", "Titanic Problem", "Waffel"),
    ("Tee", "Boston Party", "Beutel"),
    ("Wein", "Traubensaft", "Korken"),
    ("Bier", "Oktoberfest", "Schaumkrone"),
    ("Brille", "Klare Sicht", "Gläser"),
    ("Hut", "Kopfschmuck", "Krempe"),
    ("Schuhe", "Zwei Stück", "Schnürsenkel"),
    ("Hemd", "Business Look", "Knopfleiste"),
    ("Hose", "Zwei Beine", "Gürtel"),
    ("Jacke", "Außenhülle", "Reißverschluss"),
    ("Kleid", "Prinzessin", "Saum"),
    ("Socken", "Paar verlieren", "Waschmaschine"),
    ("Uhr", "Zeit anzeigen", "Zeiger"),
    ("Ring", "Ewigkeit Symbol", "Verlobung"),
    ("Tasche", "Tragbare Box", "Henkel"),
    ("Koffer", "Reise Begleiter", "Rollen"),
    ("Regenschirm", "Wetter Schutz", "Aufspannen"),
    ("Schlüssel", "Zugang gewähren", "Schlüsselbund"),
    ("Handy", "Pocket Computer", "Akku"),
    ("Radio", "Frequenz wählen", "Antenne"),
    ("Fernseher", "Couch Partner", "Fernbedienung"),
    ("Lampe", "Edison Erfindung", "Glühbirne"),
    ("Kerze", "Wind Problem", "Docht"),
    ("Spiegel", "Schneewittchen", "Spiegelbild"),
    ("Kamera", "1000 Worte", "Objektiv"),
    ("Fahrrad", "Zwei Räder", "Pedale"),
    ("Motorrad", "Harley Davidson", "Helmpflicht"),
    ("Bus", "Öffentlich fahren", "Haltestelle"),
    ("Zug", "Schiene folgen", "Schaffner"),
    ("Flugzeug", "Wright Brothers", "Landebahn"),
    ("Schiff", "Titanic Typ", "Anker"),
    ("Brücke", "Verbindung schaffen", "Pfeiler"),
    ("Straße", "Asphalt Weg", "Zebrastreifen"),
    ("Park", "Grüne Oase", "Parkbank"),
    ("See", "Stehend Wasser", "Ruderboot"),
    ("Fluss", "Fließend Wasser", "Ufer"),
    ("Berg", "Höchster Punkt", "Gipfelkreuz"),
    ("Wald", "Baum Sammlung", "Förster"),
    ("Schnee", "Weiße Flocken", "Schneemann"),
    ("Gewitter", "Zeus Zorn", "Donner"),
    ("Wind", "Unsichtbare Kraft", "Windmühle"),
    ("Nebel", "Grauer Schleier", "Sichtweite"),
    ("Frühling", "Erste Jahreszeit", "Knospen"),
    ("Sommer", "Heiße Jahreszeit", "Freibad"),
    ("Herbst", "Bunte Jahreszeit", "Laub"),
    ("Winter", "Kalte Jahreszeit", "Handschuhe"),
    ("Nacht", "Dunkel Zeit", "Sternenhimmel"),
    ("Montag", "Woche Start", "Wecker"),
    ("Geburtstag", "Einmal jährlich", "Kerzen auspusten"),
    ("Hochzeit", "Weißes Kleid", "Ja-Wort"),
    ("Weihnachten", "Dezember Fest", "Tannenbaum"),
    ("Ostern", "Buntes Ei", "Hase"),
    ("Party", "Laute Feier", "Luftballons"),
    ("Konzert", "Live Musik", "Zugabe"),
    ("Theater", "Bühne Show", "Vorhang"),
    ("Museum", "Alte Sachen", "Ausstellung"),
    ("Bibliothek", "Leise Zone", "Ausleihe"),
    ("Krankenhaus", "Weiße Kittel", "Notaufnahme"),
    ("Supermarkt", "Einkaufs Center", "Kasse"),
    ("Restaurant", "Essen gehen", "Speisekarte"),
    ("Hotel", "Übernachten", "Rezeption"),
    ("Bank", "Geld aufbewahren", "Schalter"),
    ("Polizei", "Gesetz hüten", "Blaulicht"),
    ("Feuerwehr", "Rot Fahrzeug", "Leiter"),
    ("Zahnarzt", "Zahn Doktor", "Bohrer"),
    ("Friseur", "Haar schneiden", "Schere"),
    ("Bäcker", "Früh aufstehen", "Brötchen"),
    ("Lehrer", "Wissen vermitteln", "Tafel"),
    ("Pilot", "Himmel fahren", "Cockpit"),
    ("Koch", "Essen zubereiten", "Kochmütze"),
    ("Gärtner", "Pflanzen pflegen", "Spaten"),
    ("Astronaut", "Schwerelos", "Raumanzug"),
    ("Baby", "Ganz klein", "Schnuller"),
    ("Nachbar", "Nebenan wohnen", "Gartenzaun"),
    ("Essen", "Tischmanieren", "Mahlzeit"),
    ("Trinken", "Durstlöscher", "Strohhalm"),
    ("Dunkel", "Mondschein", "Taschenlampe"),
    ("Warm", "Kuschelzeit", "Heizung"),
    ("Kalt", "Atem sichtbar", "Gänsehaut"),
    ("Groß", "Perspektive", "Riese"),
    ("Klein", "Ameisenwelt", "Lupe"),
    ("Schnell", "Zeitreise", "Stoppuhr"),
    ("Langsam", "Zeitlupe", "Schnecke"),
    ("Hoch", "Bergspitze", "Leiter"),
    ("Tief", "Meeresgrund", "Tauchen"),
    ("Neu", "Erstausgabe", "Verpackung"),
    ("Alt", "Antiquität", "Falten"),
    ("Gut", "Daumen hoch", "Lob"),
    ("Schlecht", "Daumen runter", "Note sechs"),
    ("Kette", "Verbindung", "Glieder"),
    ("Tal", "Tiefster Punkt", "Fluss"),
    ("Wiese", "Gras Teppich", "Picknick"),
    ("Frost", "Morgen Kristalle", "Eiskratzer"),
    ("Hitze", "Wüsten Gefühl", "Ventilator"),
    ("Kälte", "Arktis Gefühl", "Handschuhe"),
    ("Morgen", "Tag Beginn", "Wecker"),
    ("Mittag", "Tag Mitte", "Mittagspause"),
    ("Abend", "Tag Ende", "Sonnenuntergang"),
    ("Freitag", "TGIF Tag", "Wochenende naht"),
    ("Samstag", "Weekend Start", "Ausschlafen"),
    ("Sonntag", "Ruhe Tag", "Brunch"),
    ("Januar", "Neuer Anfang", "Vorsätze"),
    ("Dezember", "Jahr Ende", "Adventskalender"),
    ("Ferien", "Schule frei", "Zeugnisferien"),
    ("Apotheke", "Medizin kaufen", "Rezept"),
    ("Café", "Kaffee trinken", "Kuchentheke"),
    ("Post", "Brief senden", "Briefmarke"),
    ("Metzger", "Fleisch verkaufen", "Wurst"),
    ("Arzt", "Gesund machen", "Stethoskop"),
    ("Mechaniker", "Motor reparieren", "Werkstatt"),
    ("Maler", "Wand streichen", "Farbrolle"),
    ("Musiker", "Töne erzeugen", "Instrument"),
    ("Schreiber", "Worte schreiben", "Füller"),
    ("Läufer", "Schnell gehen", "Marathon"),
    ("Schwimmer", "Wasser Sport", "Badekappe"),
    ("Tänzer", "Rhythmus folgen", "Ballett"),
    ("Sänger", "Melodie machen", "Mikrofon"),
    ("Schauspieler", "Rolle spielen", "Drehbuch"),
    ("Künstler", "Kreativ sein", "Atelier"),
    ("Wissenschaftler", "Forschen immer", "Labor"),
    ("Student", "Lernen müssen", "Hörsaal"),
    ("Rentner", "Nicht arbeiten", "Parkbank"),
    ("Kind", "Noch wachsen", "Spielplatz"),
    ("Teenager", "Pubertät haben", "Pickel"),
    ("Erwachsener", "Vollständig entwickelt", "Steuererklärung"),
    ("Mann", "XY Chromosom", "Bart"),
    ("Frau", "XX Chromosom", "Dame"),
    ("Großvater", "Väter Vater", "Opa"),
    ("Großmutter", "Mütter Mutter", "Oma"),
    ("Bruder", "Gleiche Eltern", "Geschwisterstreit"),
    ("Schwester", "Gleiche Eltern", "Geschwister"),
    ("Vater", "Papa sein", "Vatertag"),
    ("Mutter", "Mama sein", "Muttertag"),
    ("Ehemann", "Ring tragen", "Bräutigam"),
    ("Ehefrau", "Ring tragen", "Braut"),
    ("Fremder", "Unbekannt bleiben", "Neuling"),
]


def load_entries(rows: list[tuple[str, str, str]] | None = None) -> list[WordEntry]:
    entries = []
    seen: set[str] = set()
    for word, hint, hint_extra in rows if rows is not None else DEFAULT_WORDS_DE:
        key = word.strip().casefold()
        if not key or key in seen:
            continue
        seen.add(key)
        entries.append(WordEntry(word=word.strip(), hint=hint.strip(), hint_extra=hint_extra.strip()))
    return entries


class WordPool:
    """Fixed pool of word entries, sampled uniformly."""

    def __init__(self, entries: list[WordEntry] | None = None, rng: random.Random | None = None):
        self.entries = list(entries) if entries is not None else load_entries()
        if not self.entries:
            raise ValueError("word pool is empty")
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.entries)

    def pick_random_entry(self) -> WordEntry:
        return self._rng.choice(self.entries)
