"""Static reference data shown next to the model-backed panels."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set

from .types import (
    CompanyNode,
    ManufacturingProcess,
    MaterialFamily,
    PlayerInfo,
    ProcessParameter,
    QuadrantInfo,
)

QUADRANTS: Dict[str, QuadrantInfo] = {
    "BIO_BIO": QuadrantInfo(
        id="BIO_BIO",
        title="BIO-BIO",
        tagline="Grown & Returned to Earth",
        definition="Polymers derived from renewable biomass that fully biodegrade in natural environments.",
        core_logic="Stability vs. Degradability",
        readiness=75,
        sustainability=95,
        scalability=60,
        cost="High",
        families=[
            MaterialFamily("PHA", "Bacterial polyesters made via fermentation.", ["PHB", "PHBH"]),
            MaterialFamily("PLA", "Fermented starch converted to lactide.", ["Ingeo", "Luminy"]),
            MaterialFamily("Starch", "Destructured starch blends.", ["Cardia", "Mater-Bi"]),
        ],
        challenges=[
            "Thermal degradation during processing",
            "Brittleness due to high crystallinity",
            "Hydrolytic instability",
        ],
        processing=["Pre-drying required (<250ppm)", "Low shear screw configuration", "Nucleating agents for cycle time"],
        applications=["Rigid Packaging", "Mulch Film", "Cutlery", "3D Printing"],
        players=[PlayerInfo("Danimer", "Nodax PHA"), PlayerInfo("NatureWorks", "Ingeo PLA"), PlayerInfo("Kaneka", "PHBH")],
    ),
    "BIO_DURABLE": QuadrantInfo(
        id="BIO_DURABLE",
        title="BIO-DURABLE",
        tagline="Green Origins, Permanent",
        definition="Chemically identical to fossil plastics but made from bio-feedstock.",
        core_logic="Feedstock Substitution",
        readiness=95,
        sustainability=60,
        scalability=85,
        cost="Medium",
        families=[
            MaterialFamily("Bio-PE", "Ethanol to ethylene.", ["I'm Green"]),
            MaterialFamily("PEF", "Bio-barrier polymer.", ["YXY"]),
            MaterialFamily("Bio-PA", "Castor oil nylons.", ["PA11", "PA6.10"]),
        ],
        challenges=["Supply chain consistency", "Land use competition", "Recycling sorting"],
        processing=["Drop-in replacement", "Standard tooling", "No new equipment needed"],
        applications=["Automotive", "Durables", "Bottles", "Textiles"],
        players=[PlayerInfo("Braskem", "Bio-PE"), PlayerInfo("Avantium", "PEF"), PlayerInfo("Neste", "Renewable Hydrocarbons")],
    ),
    "FOSSIL_BIO": QuadrantInfo(
        id="FOSSIL_BIO",
        title="FOSSIL-BIO",
        tagline="The Pragmatic Bridge",
        definition="Synthetic copolyesters from fossil sources that biodegrade.",
        core_logic="Statistical Copolyesters",
        readiness=90,
        sustainability=40,
        scalability=90,
        cost="Medium",
        families=[
            MaterialFamily("PBAT", "Flexible copolyester.", ["Ecoflex"]),
            MaterialFamily("PBS", "Semi-crystalline hybrid.", ["BioPBS"]),
            MaterialFamily("PCL", "Low melt polyester.", ["Capa"]),
        ],
        challenges=["Low modulus", "Heat deflection", "Blend compatibility"],
        processing=["Film blowing friendly", "Impact modifier role", "Thermal stability"],
        applications=["Compost Bags", "Coatings", "Ag Films", "Blends"],
        players=[PlayerInfo("BASF", "Ecoflex"), PlayerInfo("Novamont", "Mater-Bi"), PlayerInfo("Mitsubishi", "BioPBS")],
    ),
    "NEXT_GEN": QuadrantInfo(
        id="NEXT_GEN",
        title="NEXT-GEN",
        tagline="Grown, Not Made",
        definition="Materials produced via biological assembly or biomimicry.",
        core_logic="Bio-Fabrication",
        readiness=30,
        sustainability=100,
        scalability=20,
        cost="Premium",
        families=[
            MaterialFamily("Mycelium", "Fungal networks.", ["Mushroom Pkg"]),
            MaterialFamily("Algae", "Biomass filler.", ["Bloom"]),
            MaterialFamily("Protein", "Spider silk/Milk.", ["Brewed"]),
        ],
        challenges=["Water sensitivity", "Batch variability", "Production time"],
        processing=["Growth cycles", "Baking/Drying", "Not injection moldable"],
        applications=["Luxury Pkg", "Leather Alt", "Insulation", "Foams"],
        players=[PlayerInfo("Ecovative", "Mycelium"), PlayerInfo("Newlight", "AirCarbon"), PlayerInfo("Spiber", "Proteins")],
    ),
}


def _params(*rows) -> List[ProcessParameter]:
    return [ProcessParameter(*row) for row in rows]


PROCESSES: List[ManufacturingProcess] = [
    ManufacturingProcess(
        id="injection",
        name="Injection Molding",
        description="High-volume production of complex rigid parts.",
        outputs=["Phone Cases", "Cutlery", "Automotive Trim", "Medical Devices"],
        run_logic=(
            "Bio-polymers like PHA and PLA are shear-sensitive. Unlike Polypropylene, they degrade rapidly if dwell "
            "time is too long. Lower the barrel temperature profile and increase back pressure slightly to ensure "
            "melt homogeneity without burning."
        ),
        parameters=_params(
            ("Melt Temp", "°C", "230 - 250", "180 - 200", "Lower temp prevents thermal degradation."),
            ("Mold Temp", "°C", "20 - 40", "40 - 60", "Warm mold promotes crystallization in PHA."),
            ("Back Pressure", "bar", "50", "70", "Ensures mixing without high shear."),
        ),
    ),
    ManufacturingProcess(
        id="film",
        name="Blown Film",
        description="Continuous extrusion of thin, flexible films.",
        outputs=["Compost Bags", "Ag Mulch Film", "Food Packaging", "Shopping Bags"],
        run_logic=(
            "Melt strength is the killer here. Bio-materials often lack the elasticity to hold a stable bubble. "
            'Run the line slower and use "Dual-Lip" air rings to freeze the bubble immediately upon exit. '
            "Expect lower draw-down ratios."
        ),
        parameters=_params(
            ("Die Gap", "mm", "0.8", "1.2", "Wider gap reduces shear heat at exit."),
            ("Blow-Up Ratio", "ratio", "1:3", "1:2", "Lower ratio prevents bubble collapse."),
            ("Frost Line", "height", "High", "Low", "Lock in geometry immediately."),
        ),
    ),
    ManufacturingProcess(
        id="thermo",
        name="Thermoforming",
        description="Heating a sheet and vacuum forming it over a mold.",
        outputs=["Coffee Lids", "Clamshells", "Yogurt Cups", "Trays"],
        run_logic=(
            "The processing window is extremely narrow. PLA sags rapidly once it passes its glass transition "
            '(Tg ~60°C). Standard heating banks are not enough; use "Sag Bands" or precise zoning to keep the '
            "sheet tensioned before forming."
        ),
        parameters=_params(
            ("Sheet Temp", "°C", "150", "90 - 110", "Prevent sheet sagging and tearing."),
            ("Cycle Time", "sec", "3.0", "5.0", "Bio-materials set slower in the mold."),
            ("Plug Material", "type", "Nylon", "Syntactic Foam", "Prevents chilling the sheet too fast."),
        ),
    ),
    ManufacturingProcess(
        id="foam",
        name="Foaming",
        description="Creating lightweight cellular structures using gas injection.",
        outputs=["Shoe Soles", "Insulation", "Protective Packaging", "Yoga Mats"],
        run_logic=(
            "Gas containment is difficult. CO2 solubility in bioplastics is high, but it diffuses out too fast, "
            'causing foam collapse. A high crystallization rate is needed to "freeze" the cell walls before the '
            "gas escapes."
        ),
        parameters=_params(
            ("Gas Load", "%", "5.0", "2.5", "Lower gas to prevent cell rupture."),
            ("Melt Strength", "cN", "High", "Low (add branchers)", "Additives needed to hold bubble structure."),
            ("Cooling Rate", "rate", "Medium", "Rapid", "Freeze foam structure instantly."),
        ),
    ),
    ManufacturingProcess(
        id="fiber",
        name="Fiber Spinning",
        description="Extruding filaments for textiles and non-wovens.",
        outputs=["Apparel", "Teabags", "Wipes", "Carpets"],
        run_logic=(
            "Moisture is the enemy. Even 50ppm of water will cause hydrolysis in the extruder, breaking the polymer "
            "chains, and the fiber will snap during drawing. Pre-drying for 4-6 hours before the hopper is mandatory."
        ),
        parameters=_params(
            ("Moisture", "ppm", "<200", "<50", "Critical to prevent chain scission."),
            ("Draw Ratio", "ratio", "4:1", "2.5:1", "Gentler stretching avoids breakage."),
            ("Quench Air", "m/s", "0.5", "0.2", "Low turbulence prevents filament flutter."),
        ),
    ),
    ManufacturingProcess(
        id="3d",
        name="3D Printing (FDM)",
        description="Additive manufacturing layer by layer.",
        outputs=["Prototypes", "Custom Jigs", "Medical Scaffolds", "Spare Parts"],
        run_logic=(
            "Heat creep is the main failure mode. Bio-filaments soften well before the nozzle, clogging the throat "
            "tube, so aggressive heatsink cooling is needed. Bed adhesion is tricky as PHA warps significantly while "
            "it crystallizes."
        ),
        parameters=_params(
            ("Nozzle Temp", "°C", "210", "195", "Prevent stringing and oozing."),
            ("Bed Temp", "°C", "60", "0 - 40", "Keep PHA amorphous on first layer."),
            ("Retraction", "mm", "5.0", "2.0", "Prevent soft filament grinding."),
        ),
    ),
    ManufacturingProcess(
        id="bio",
        name="Bio-Assembly",
        description="Growing materials using living organisms.",
        outputs=["Mycelium Packaging", "Bacterial Leather", "Bio-Cement", "Scaffolds"],
        run_logic=(
            "This is farming, not manufacturing: the line is a life support system and its parameters are "
            "biological, not mechanical. The risk is contamination; Trichoderma (green mold) will outcompete the "
            "material if sterility is breached."
        ),
        parameters=_params(
            ("Humidity", "%", "N/A", "90+", "Essential for hyphal network growth."),
            ("Incubation", "days", "Min", "5 - 14", "Growth takes time vs instant plastic."),
            ("Sterilization", "temp", "N/A", "121°C", "Substrate must be pasteurized first."),
        ),
    ),
]

# keyword found in a constraint -> process that deserves a warning badge
PROCESS_CONSTRAINT_KEYWORDS = {
    "heat": "injection",
    "moisture": "fiber",
    "melt": "film",
}

_COMPANY_ROWS = [
    # North America
    ("bolt", "Bolt Threads", "Emeryville, CA", 37.8313, -122.2852, "NEXT_GEN", "Mylo / B-Silk", "Mycelium leather and spider silk proteins via fermentation."),
    ("sway", "Sway", "Monterey, CA", 36.6002, -121.8947, "BIO_BIO", "Seaweed Packaging", "Home compostable thin films from regenerative seaweed."),
    ("mycoworks", "MycoWorks", "Emeryville, CA", 37.8393, -122.2912, "NEXT_GEN", "Reishi", "Fine mycelium leather grown in trays."),
    ("nfw", "Natural Fiber Welding", "Peoria, IL", 40.6936, -89.5890, "BIO_BIO", "Mirum", "Plant-based leather without plastics or synthetic binders."),
    ("checkerspot", "Checkerspot", "Alameda, CA", 37.7652, -122.2416, "NEXT_GEN", "WNDR Alpine", "Algae oil converted into rigid polyurethane foam cores."),
    ("bucha", "Bucha Bio", "Houston, TX", 29.7604, -95.3698, "BIO_BIO", "Shorai", "Bacterial nanocellulose composites."),
    ("keel", "Keel Labs", "Morrisville, NC", 35.8235, -78.8256, "BIO_BIO", "Kelsun", "Yarn derived from abundant seaweed polymers."),
    ("loliware", "Loliware", "San Francisco, CA", 37.7749, -122.4194, "BIO_BIO", "Seaweed Straws", "Edible and hyper-compostable utensils."),
    ("livingink", "Living Ink", "Aurora, CO", 39.7294, -104.8319, "BIO_BIO", "Algae Ink", "Carbon negative black pigment from algae waste."),
    ("huue", "Huue", "Berkeley, CA", 37.8715, -122.2730, "NEXT_GEN", "Bio-Indigo", "Biosynthetic indigo dye for denim."),
    ("danimer", "Danimer Scientific", "Bainbridge, GA", 30.9038, -84.5755, "BIO_BIO", "Nodax PHA", "Canola oil fermentation into PHA."),
    ("newlight", "Newlight Tech", "Huntington Beach, CA", 33.6603, -117.9992, "NEXT_GEN", "AirCarbon", "Methane capture to PHB."),
    ("ecovative", "Ecovative", "Green Island, NY", 42.7427, -73.6936, "NEXT_GEN", "Mycelium Foundry", "Aerial mycelium tech for foams and bacon."),
    ("cruzfoam", "Cruz Foam", "Santa Cruz, CA", 36.9741, -122.0308, "BIO_BIO", "Chitin Foam", "Shrimp shell waste into EPS alternative."),
    ("mango", "Mango Materials", "San Francisco, CA", 37.7749, -122.4194, "BIO_BIO", "YOPP PHA", "Methane-fed bacteria producing PHA pellets."),
    ("natureworks", "NatureWorks", "Minnetonka, MN", 44.9778, -93.2650, "BIO_BIO", "Ingeo PLA", "World's largest PLA producer."),
    ("origin", "Origin Materials", "West Sacramento, CA", 38.5805, -121.5302, "BIO_DURABLE", "Carbon Negative PET", "Wood residue to paraxylene."),
    ("ginko", "Ginkgo Bioworks", "Boston, MA", 42.3601, -71.0589, "NEXT_GEN", "Cell Engineering", "The platform for bio-design."),
    ("modern", "Modern Meadow", "Nutley, NJ", 40.8223, -74.1599, "NEXT_GEN", "Bio-Freas", "Bio-collagen proteins."),
    ("footprint", "Footprint", "Gilbert, AZ", 33.3528, -111.7890, "BIO_BIO", "Fiber Cups", "Molded fiber technology to eliminate single-use plastic."),
    # Europe
    ("notpla", "Notpla", "London, UK", 51.5323, -0.0555, "BIO_BIO", "Ooho", "Edible seaweed membranes for liquids."),
    ("paboco", "Paboco", "Slangerup, Denmark", 55.8456, 12.1729, "BIO_BIO", "Paper Bottle", "Bio-barrier coated paper bottles."),
    ("mogu", "Mogu", "Inarzo, Italy", 45.7866, 8.6700, "NEXT_GEN", "Fungal Flooring", "Mycelium acoustic panels and floors."),
    ("vegea", "Vegea", "Milan, Italy", 45.4642, 9.1900, "BIO_BIO", "Wine Leather", "Grape marc (wine waste) into leather alternative."),
    ("ananas", "Ananas Anam", "London, UK", 51.5074, -0.1278, "BIO_BIO", "Piñatex", "Pineapple leaf fibers."),
    ("amsilk", "AMSilk", "Munich, Germany", 48.1351, 11.5820, "NEXT_GEN", "Biosteel", "Recombinant spider silk proteins."),
    ("traceless", "Traceless", "Hamburg, Germany", 53.5511, 9.9937, "BIO_BIO", "Plant Plastic", "Agricultural residues into compostable granulate."),
    ("xampla", "Xampla", "Cambridge, UK", 52.2053, 0.1218, "BIO_BIO", "Plant Protein Film", "Supramolecular plant protein structures."),
    ("bcomp", "Bcomp", "Fribourg, Switzerland", 46.8065, 7.1620, "BIO_BIO", "Amplitex", "High performance flax composites for automotive."),
    ("spinnova", "Spinnova", "Jyväskylä, Finland", 62.2426, 25.7473, "BIO_BIO", "Wood Fiber", "Mechanical pulping of wood into textile fiber without harmful chemicals."),
    ("infinited", "Infinited Fiber", "Espoo, Finland", 60.2055, 24.6559, "BIO_DURABLE", "Infinna", "Regenerated cellulose from textile waste."),
    ("renewcell", "Renewcell", "Sundsvall, Sweden", 62.3908, 17.3069, "BIO_DURABLE", "Circulose", "Dissolving pulp from recycled cotton."),
    ("colorifix", "Colorifix", "Norwich, UK", 52.6309, 1.2974, "NEXT_GEN", "DNA Dye", "Microbes engineered to produce pigment."),
    ("carbios", "Carbios", "Clermont-Ferrand, France", 45.7772, 3.0870, "FOSSIL_BIO", "Enzymatic Recycling", "Enzymes that depolymerize PET indefinitely."),
    ("sulapac", "Sulapac", "Helsinki, Finland", 60.1699, 24.9384, "BIO_BIO", "Wood Injection", "Wood chips bound with plant based binders for injection molding."),
    ("avantium", "Avantium", "Amsterdam, NL", 52.3676, 4.9041, "BIO_DURABLE", "PEF", "Furanics based barrier polymer."),
    ("shellworks", "The Shellworks", "London, UK", 51.5074, -0.11, "NEXT_GEN", "Vivomer", "Bacterial cellulose packaging."),
    ("pili", "Pili", "Paris, France", 48.8566, 2.3522, "NEXT_GEN", "Bio-Pigment", "Fermented dyes to replace petrochemical colors."),
    ("basf", "BASF", "Ludwigshafen, DE", 49.4875, 8.4660, "FOSSIL_BIO", "Ecoflex", "PBAT standards for compostability."),
    # Asia
    ("banofi", "Banofi Leather", "Kolkata, India", 22.5726, 88.3639, "BIO_BIO", "Banana Leather", "Upcycling banana crop waste into leather alternative."),
    ("spiber", "Spiber", "Tsuruoka, Japan", 38.7236, 139.8256, "NEXT_GEN", "Brewed Protein", "Fermented structural proteins for fibers."),
    ("bluepha", "Bluepha", "Beijing, China", 39.9042, 116.4074, "BIO_BIO", "Bluepha PHA", "Seawater fermentation of PHA."),
    ("kaneka", "Kaneka", "Osaka, Japan", 34.6937, 135.5023, "BIO_BIO", "PHBH", "Flexible PHA for home composting."),
    ("mitsubishi", "Mitsubishi Chemical", "Tokyo, Japan", 35.6762, 139.6503, "FOSSIL_BIO", "BioPBS", "Bio-succinic acid polyesters."),
    ("cj", "CJ Biomaterials", "Seoul, South Korea", 37.5665, 126.9780, "BIO_BIO", "Amorphous PHA", "Toughness modifier for PLA."),
    ("rwdc", "RWDC Industries", "Singapore", 1.3521, 103.8198, "BIO_BIO", "Solon", "PHA for replacing PP drinking straws."),
    # South America
    ("braskem", "Braskem", "São Paulo, Brazil", -23.5505, -46.6333, "BIO_DURABLE", "I'm Green", "Sugarcane ethanol to polyethylene."),
    ("polybion", "Polybion", "Guanajuato, Mexico", 21.0190, -101.2574, "NEXT_GEN", "Celium", "Bacterial cellulose leather grown on fruit waste."),
    ("desserto", "Desserto", "Guadalajara, Mexico", 20.6597, -103.3496, "BIO_BIO", "Cactus Leather", "Nopal cactus based vegan leather."),
    # Middle East / Oceania
    ("ubq", "UBQ Materials", "Tel Aviv, Israel", 32.0853, 34.7818, "FOSSIL_BIO", "UBQ", "Converting unsorted household waste into thermoplastic."),
    ("tipa", "Tipa", "Hod Hasharon, Israel", 32.1564, 34.8890, "FOSSIL_BIO", "Tipa Film", "High performance compostable flexible films."),
    ("greatwrap", "Great Wrap", "Melbourne, Australia", -37.8136, 144.9631, "BIO_BIO", "Potato Wrap", "Pallet wrap from potato waste."),
    ("samsara", "Samsara Eco", "Canberra, Australia", -35.2809, 149.1300, "NEXT_GEN", "Enzymatic Recycling", "Infinite recycling of plastics via enzymes."),
]

COMPANIES: List[CompanyNode] = [CompanyNode(*row) for row in _COMPANY_ROWS]


def get_process(process_id: str) -> Optional[ManufacturingProcess]:
    for proc in PROCESSES:
        if proc.id == process_id:
            return proc
    return None


def flag_process_constraints(constraints: Iterable[str]) -> Set[str]:
    """Process ids whose known failure mode shows up in the analyzer's constraint list."""
    flagged: Set[str] = set()
    for constraint in constraints or []:
        low = str(constraint or "").lower()
        for keyword, process_id in PROCESS_CONSTRAINT_KEYWORDS.items():
            if keyword in low:
                flagged.add(process_id)
    return flagged


def filter_companies(quadrant: str = "ALL", search: str = "") -> List[CompanyNode]:
    needle = str(search or "").strip().lower()
    out: List[CompanyNode] = []
    for company in COMPANIES:
        if quadrant and quadrant != "ALL" and company.quadrant != quadrant:
            continue
        if needle and needle not in company.name.lower() and needle not in company.product.lower():
            continue
        out.append(company)
    return out
